from application import app as application  # Gunicorn / Elastic Beanstalk look for 'application'
