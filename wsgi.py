# WSGI entry point for the MindSync API.
# Used by WSGI servers (e.g., Gunicorn) to run the app in production:
#   gunicorn wsgi:application

from mindsync import create_app  # Import the application factory function

# Configuration class to load; DevConfig gives a local SQLite database
# with tables created on startup.
config = "mindsync.config.ProdConfig"

# The 'application' variable is recognized by most WSGI servers as the entry point.
application = create_app(config)
