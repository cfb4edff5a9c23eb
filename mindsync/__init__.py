from cachelib import SimpleCache
from dotenv import load_dotenv
from flask import Flask
from werkzeug.utils import import_string

from .config import DEFAULT_SECRET_KEY
from .errors import register_error_handlers
from .extensions import db, migrate, server_session, cors
from .logging_config import init_logging
from .routes import register_blueprints
from .storage import init_storage

load_dotenv()


def create_app(config_class="mindsync.config.ProdConfig", overrides=None):
    """
    Build the MindSync API app: config, extensions, storage backend,
    session store, error handlers and blueprints.

    Args:
        config_class (str | type): Config class or its import path.
        overrides (dict): Extra config values applied after the class.
    """
    app = Flask(__name__)
    # Config class first, then per-instance overrides
    if isinstance(config_class, str):
        config_class = import_string(config_class)
    app.config.from_object(config_class)
    if overrides:
        app.config.update(overrides)

    if app.config["SECRET_KEY"] == DEFAULT_SECRET_KEY and not (app.debug or app.testing):
        raise RuntimeError("SECRET_KEY must be set to a non-default value")

    init_logging(app)

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGIN"]}},
        supports_credentials=True,
    )

    storage = init_storage(app)

    # Sessions live next to the data: the "sessions" table for the database
    # backend, an in-process cache for the memory backend
    app.config.setdefault(
        "SESSION_TYPE", "sqlalchemy" if storage.name == "database" else "cachelib"
    )
    if app.config["SESSION_TYPE"] == "sqlalchemy":
        app.config.setdefault("SESSION_SQLALCHEMY", db)
    elif app.config["SESSION_TYPE"] == "cachelib":
        app.config.setdefault("SESSION_CACHELIB", SimpleCache())
    server_session.init_app(app)

    register_error_handlers(app)
    # JSON API under /api
    register_blueprints(app)

    # Dev and test create tables directly; production runs migrations
    if app.config.get("CREATE_DB"):
        with app.app_context():
            db.create_all()

    # SQLite ignores foreign keys unless asked
    if (app.config.get("SQLALCHEMY_DATABASE_URI") or "").startswith("sqlite"):
        with app.app_context():
            with db.engine.connect() as connection:
                connection.execute(db.text("PRAGMA foreign_keys=ON"))

    app.logger.info("MindSync ready (storage=%s)", storage.name)
    return app
