#setup: python -m venv .venv
#setup: source .venv/bin/activate   # (windows: .venv\Scripts\activate)
#setup: pip install -U pip -e .
#setup: flask --app fincalc.wsgi run --port 5000 --debug

from fincalc.app import create_app

app = create_app()
