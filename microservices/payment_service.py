#!/usr/bin/env python3
"""
Payment service: answers GET /pay with the port it was started on.
"""

import logging

from flask import Flask, Response, jsonify, request

from .config import PaymentConfig

logger = logging.getLogger(__name__)


def create_app(config: PaymentConfig) -> Flask:
    app = Flask(__name__)
    message = f"Payment from port {config.port}"

    @app.before_request
    def log_request():
        logger.debug(f"Payment service received: {request.path}")

    @app.route('/pay')
    def pay():
        return Response(message, status=200, mimetype='text/plain')

    @app.route('/health')
    def health():
        """Health check endpoint"""
        return jsonify({
            'service': config.service_name,
            'status': 'healthy',
            'port': config.port,
        })

    return app


def main():
    config = PaymentConfig.from_env()
    logging.basicConfig(level=config.log_level)

    app = create_app(config)
    logger.info(f"🚀 Payment service starting on port {config.port}...")
    app.run(host=config.host, port=int(config.port), debug=False, threaded=True)


if __name__ == '__main__':
    main()
