import logging

from flask import Flask

from .controllers.costs import bp as costs_bp
from .controllers.rates import bp as rates_bp
from .models.config import PricingConfig
from .models.store import Store
from .services.pricing_service import PricingService


def create_app(config: dict | None = None, store=None):
    app = Flask(__name__)
    app.config["LOG_LEVEL"] = "INFO"
    # RENTAL_PRICING_PRICING_TAX_PERCENTAGE=15 -> app.config["PRICING_TAX_PERCENTAGE"]
    app.config.from_prefixed_env("RENTAL_PRICING")
    if config:
        app.config.update(config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    pricing_config = PricingConfig.from_mapping(app.config)
    app.extensions["pricing_service"] = PricingService(
        config=pricing_config,
        store=store if store is not None else Store.instance(),
    )
    app.register_blueprint(rates_bp)
    app.register_blueprint(costs_bp)

    return app
