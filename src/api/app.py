from typing import Any, Dict, Optional

from flask import Flask
from flask_cors import CORS

from config import MAX_CONTENT_LENGTH
from core.container import ServiceContainer
from api.converters import OrderTypeConverter
from api.errors import register_error_handlers
from api.routes import api_bp


def create_app(container: Optional[ServiceContainer] = None,
               config: Optional[Dict[str, Any]] = None) -> Flask:
    """Build the order API application around one shared service container."""
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_CONTENT_LENGTH
    if config:
        app.config.update(config)

    # 保留字段顺序，中文不转义
    app.json.sort_keys = False
    app.json.ensure_ascii = False

    CORS(app, resources={r"/api/*": {"origins": "*"}})

    app.url_map.converters["order_type"] = OrderTypeConverter
    app.extensions["services"] = container or ServiceContainer()
    app.register_blueprint(api_bp)
    register_error_handlers(app)
    return app
