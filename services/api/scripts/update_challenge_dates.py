import argparse
import sys
import os
from datetime import date
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Add api path to sys.path
sys.path.append(os.path.join(os.path.dirname(__file__), "../"))

from app.services.auth_service import set_challenge_start
from app.settings import settings

def update_challenge_dates(start: date):
    print(f"Connecting to {settings.database_url}...")
    engine = create_engine(settings.database_url)
    Session = sessionmaker(bind=engine)
    session = Session()

    try:
        count = set_challenge_start(session, start)
        print(f"Updated {count} users with challenge start date: {start.isoformat()}")
    except Exception as e:
        session.rollback()
        print(f"Error: {e}")
        raise
    finally:
        session.close()

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Set the challenge start date for every user.")
    parser.add_argument("start", type=date.fromisoformat, help="YYYY-MM-DD")
    args = parser.parse_args()
    update_challenge_dates(args.start)
