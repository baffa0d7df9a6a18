from jobscheduler import create_app

app = create_app()

# gunicorn wsgi:app
# Session state is held in process memory, so run a single worker: gunicorn -w 1 wsgi:app
