#!/usr/bin/env python3
"""
Pro Sites billing - application entry point

    flask --app app run
    flask --app app init-db
"""

import os

from dotenv import load_dotenv

# Environment must be loaded before the config classes are imported
load_dotenv()

from prosites.app import create_app  # noqa: E402
from prosites.app.config import config  # noqa: E402

app = create_app(config.get(os.environ.get('FLASK_ENV', 'production'), config['default']))

if __name__ == '__main__':
    app.run(
        host=os.environ.get('HOST', '0.0.0.0'),
        port=int(os.environ.get('PORT', 5000)),
        debug=app.config.get('DEBUG', False)
    )
