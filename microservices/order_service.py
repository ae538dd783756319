#!/usr/bin/env python3
"""
Order service: answers GET /order by relaying the payment service's reply.
"""

import logging
from typing import Optional

from flask import Flask, Response, jsonify, request

from . import client as payment
from .client import PaymentClient
from .config import OrderConfig
from .registry import build_resolver

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    payment.RESOLUTION: 503,
    payment.CONNECTION: 502,
    payment.TIMEOUT: 504,
    payment.STATUS: 502,
}


def create_app(config: OrderConfig, payment_client: Optional[PaymentClient] = None) -> Flask:
    if payment_client is None:
        payment_client = PaymentClient.from_config(config, build_resolver(config))

    app = Flask(__name__)
    app.extensions['payment_client'] = payment_client

    @app.before_request
    def log_request():
        logger.debug(f"Order service received: {request.path}")

    @app.route('/order')
    def order():
        result = payment_client.fetch()
        if result.ok:
            return Response(result.body, status=200, content_type=result.content_type or 'text/plain')

        status = ERROR_STATUS.get(result.error.kind, 500)
        logger.error(f"Order failed with {status}: {result.error.message}")
        return Response(result.error.message, status=status, mimetype='text/plain')

    @app.route('/health')
    def health():
        """Health check endpoint, does not call downstream"""
        return jsonify({
            'service': config.service_name,
            'status': 'healthy',
            'dependencies': [config.payment_service_name],
        })

    return app


def main():
    config = OrderConfig.from_env()
    logging.basicConfig(level=config.log_level)

    app = create_app(config)
    resolver = app.extensions['payment_client'].resolver
    logger.info(f"🚀 Order service starting on port {config.port}...")
    logger.info(f"🔗 Resolving {config.payment_service_name} with {resolver!r}")
    app.run(host=config.host, port=int(config.port), debug=False, threaded=True)


if __name__ == '__main__':
    main()
