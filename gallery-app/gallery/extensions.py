"""
Flask extensions shared by the admin and public servers.
"""

from flask_sqlalchemy import SQLAlchemy

# Database instance, bound to each app in gallery.bootstrap
db = SQLAlchemy()
