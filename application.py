#!/usr/bin/env python
"""
Petty Cash Manager Application Entry Point

This is the main entry point for the Flask application.
It imports the app factory and creates the Flask app.
"""

import os
from pettycash import create_app, db

# Create the Flask application
app = create_app(os.environ.get('FLASK_CONFIG', 'development'))

if __name__ == '__main__':
    with app.app_context():
        # Create tables if they don't exist
        db.create_all()
        app.logger.info('Tables created')
        with db.engine.connect() as conn:
            app.logger.info('Connected to %s', conn.engine.url.render_as_string(hide_password=True))

    # Run the development server
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port)
