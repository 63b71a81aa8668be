import logging
import os
import random

from flask import Flask, jsonify

from routes.catalog import bp as catalog_bp
from routes.recommendations import bp as recommendations_bp
from routes.history import bp as history_bp
from services import core
from services.catalog import CatalogStore
from services.dataset import load_dataset
from services.errors import CatalogError
from services.recommendations import RandomizationPolicy, RecommendationEngine

logger = logging.getLogger(__name__)


def create_app(test_config=None):
    """Build the app.

    ``test_config`` overrides app config. ``CATALOG_RECORDS`` seeds the store
    directly instead of reading ``CATALOG_CSV``; ``RANDOM_SEED`` makes the
    sampling and ranking reproducible.
    """
    app = Flask(__name__)
    app.json.sort_keys = False

    # Signs the cookie session that carries each browser's view history.
    # Prefer environment variable; fall back to a deterministic dev default.
    app.secret_key = os.environ.get('SECRET_KEY') or 'pokedex-browser-dev-secret-key'
    app.config.update(
        CATALOG_CSV=core.CATALOG_CSV,
        CATALOG_DB=core.CATALOG_DB,
        RANDOM_SEED=None,
    )
    if test_config:
        app.config.update(test_config)

    seed = app.config['RANDOM_SEED']
    store = CatalogStore(app.config['CATALOG_DB'], rng=random.Random(seed))
    records = app.config.get('CATALOG_RECORDS')
    if records is None:
        records = load_dataset(app.config['CATALOG_CSV'])
    store.load(records)

    app.extensions['catalog_store'] = store
    app.extensions['recommendation_engine'] = RecommendationEngine(
        store, RandomizationPolicy(random.Random(seed))
    )

    app.register_blueprint(catalog_bp)
    app.register_blueprint(recommendations_bp)
    app.register_blueprint(history_bp)

    @app.errorhandler(CatalogError)
    def _catalog_error(e):
        if e.status_code >= 500:
            logger.error('%s: %s', e.message, e.details)
        return jsonify(e.to_dict()), e.status_code

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok', 'catalog_size': store.count()})

    return app


if __name__ == '__main__':
    logging.basicConfig(
        level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    )
    port = int(os.environ.get('PORT', 5000))
    create_app().run(host='0.0.0.0', port=port, debug=True)
