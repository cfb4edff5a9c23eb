# Import Flask extensions for database, migrations, sessions and CORS
from flask_sqlalchemy import SQLAlchemy      # ORM for database models and queries
from flask_migrate import Migrate            # Database schema migrations
from flask_session import Session            # Server-side session store
from flask_cors import CORS                  # Cross-origin access for the frontend

# Instantiate the extensions (to be initialized with the Flask app in the factory)
db = SQLAlchemy()            # Handles all database operations and models
migrate = Migrate()          # Manages database migrations (schema changes)
server_session = Session()   # Keeps session data in the "sessions" table (or a cache)
cors = CORS()                # Lets the SPA send credentialed requests
