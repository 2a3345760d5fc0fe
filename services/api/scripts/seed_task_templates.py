import sys
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Add api path to sys.path
sys.path.append(os.path.join(os.path.dirname(__file__), "../"))

from app.services.auth_service import backfill_default_templates
from app.settings import settings

def seed_task_templates():
    print(f"Connecting to {settings.database_url}...")
    engine = create_engine(settings.database_url)
    Session = sessionmaker(bind=engine)
    session = Session()

    try:
        touched = backfill_default_templates(session)
        print(f"Seeded default task templates for {touched} users.")
    except Exception as e:
        session.rollback()
        print(f"Error: {e}")
        raise
    finally:
        session.close()

if __name__ == "__main__":
    seed_task_templates()
