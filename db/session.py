from sqlmodel import Session, create_engine

from core.config import SQL_ECHO, build_database_url

# Connects app to the relational database (PostgreSQL in production)

DATABASE_URL = build_database_url()

# The Wire / Link That Lets Us Pass Data from App -> db
# Note: SQL_ECHO=true will log all SQL statements, keep it off in production
engine = create_engine(DATABASE_URL, echo=SQL_ECHO, pool_pre_ping=True)


# Getter for this Wire, modified for FastAPI dependency injection
def get_session():
    with Session(engine) as session:
        yield session
