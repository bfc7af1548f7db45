#!/usr/bin/env python3
import os
import sys

# Add parent directory to Python path to import project modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.exc import SQLAlchemyError

from db.database import SessionLocal
from services.prompt_guidelines import STYLE_GUIDE_NAME, seed_style_guide
from utils.logging import SessionLogger, get_logger

logger = get_logger(__name__)

def main():
    """Add the style guide system prompt to every novel that lacks it"""
    SessionLogger.start_session("add_style_guide_prompt")
    db = SessionLocal()
    try:
        counts = seed_style_guide(db)
    except SQLAlchemyError as e:
        logger.error(f"Error seeding style guide prompt: {str(e)}")
        print(f"Error: {str(e)}")
        return 1
    finally:
        db.close()

    print(f"{STYLE_GUIDE_NAME}: added to {counts['added']} novels, updated {counts['updated']}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
