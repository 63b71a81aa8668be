from flask import current_app, jsonify


def get_store():
    """Catalog store attached to the running app by ``create_app``."""
    return current_app.extensions['catalog_store']


def get_engine():
    return current_app.extensions['recommendation_engine']


def records_response(records):
    return jsonify([r.to_json() for r in records])
