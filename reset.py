"""Drop and recreate every table. Destroys all data."""
from application import app, db

with app.app_context():
    db.drop_all()
    app.logger.warning('Dropped all tables')
    db.create_all()
    app.logger.info('Created fresh tables')
