#!/usr/bin/env python3
"""Public gallery server - exposed to visitors. Port configurable via PUBLIC_PORT in .env."""

from flask import Flask
from gallery.bootstrap import init_app
from gallery.config import PUBLIC_PORT
from gallery.public.routes import public_bp

app = Flask(__name__)
init_app(app)

app.register_blueprint(public_bp)

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=PUBLIC_PORT, debug=False)
