from sqlalchemy.orm import declarative_base

# Shared declarative base for every ORM model
Base = declarative_base()
