from sqlalchemy.orm import declarative_base

# Declarative base shared by every model
Base = declarative_base()
