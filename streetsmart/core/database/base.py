# File: streetsmart/core/database/base.py

from sqlalchemy.orm import declarative_base

# The shared registry. Video and clip models inherit from this.
Base = declarative_base()
