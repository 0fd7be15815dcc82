"""
Database Base Module

Creates the SQLAlchemy instance shared by all models.
Kept separate from app.py so models and services can import it
without a circular import.
"""

from flask_sqlalchemy import SQLAlchemy

# Bound to the Flask app in create_app()
db = SQLAlchemy()
