"""SQLAlchemy schema for the relational credential store."""

from sqlalchemy import Column, DateTime, Integer, MetaData, String, Table, func, text

USERS_TABLE_NAME = 'users'

metadata = MetaData()

users_table = Table(
    USERS_TABLE_NAME,
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('name', String(255), nullable=False, server_default=text("'User'")),
    Column('email', String(255), nullable=False, unique=True),
    Column('password', String(255), nullable=False),
    Column('created_at', DateTime, nullable=False, server_default=func.now()),
)
