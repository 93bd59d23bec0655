# database.py
from databases import Database
from sqlalchemy import create_engine, MetaData
from superhero_app.config import DATABASE_URL

database = Database(DATABASE_URL)
metadata = MetaData()
engine = create_engine(DATABASE_URL)


def as_dict(record):
    """Turn a fetched row into a plain dict for the response models."""
    if record is None:
        return None
    return dict(record._mapping)
