"""
- RCL Backend -
This flask app implements the 'RCL Backend'-API (see `openapi.yaml`
in this package).
"""

from typing import Optional
from time import time, sleep

from flask import Flask
from dcm_common.db import SQLAdapter
from dcm_common.services import DefaultView
from dcm_common.services import extensions as common_extensions

from rcl_backend.config import AppConfig
from rcl_backend.components import (
    DCFRestClient0,
    ReportStore,
    PayloadBuilder,
    ReportController,
)
from rcl_backend.views import ReportLifecycleView
from rcl_backend import extensions


def app_factory(
    config: AppConfig,
    db: Optional[SQLAdapter] = None,
    transport=None,
    as_process: bool = False,
    block: bool = False,
):
    """
    Returns a flask-app-object.

    config -- app config derived from `AppConfig`
    db -- database adapter
          (default None; uses `config.db`)
    transport -- DCF-client
                 (default None; uses `DCFRestClient0` with the settings
                 from `config.authority`)
    as_process -- whether the app is intended to be run as process via
                  `app.run`; if `True`, startup tasks like initializing
                  the database are prepended to `app.run` instead of
                  being run when this factory is executed
                  (default False)
    block -- whether to block execution until all extensions are ready
             (up to 10 seconds); only relevant if not `as_process`
             (default False)
    """

    app = Flask(__name__)
    app.config.from_object(config)

    # create components and View-classes
    controller = ReportController(
        ReportStore(db or config.db),
        transport
        or DCFRestClient0(
            config.authority.auth,
            config.authority.url,
            config.authority.proxy,
            config.authority.timeout,
        ),
        config.authority.data_collection,
        PayloadBuilder(config.payload_destination),
        config.DEBUG_RETAIN_PAYLOAD,
    )
    report_view = ReportLifecycleView(config, controller)

    # register extensions
    if config.ALLOW_CORS:
        app.extensions["cors"] = common_extensions.cors_loader(app)
    app.extensions["db"] = common_extensions.db_loader(
        app, config, config.db, as_process
    )
    app.extensions["db_init"] = extensions.db_init_loader(
        app,
        config,
        db or config.db,
        as_process,
        [
            common_extensions.ExtensionEventRequirement(
                app.extensions["db"].ready, "database connection made"
            )
        ],
    )

    def ready():
        """Define condition for readiness."""
        return (
            app.extensions["db"].ready.is_set()
            and app.extensions["db_init"].ready.is_set()
        )

    # block until ready
    if block and not as_process:
        time0 = time()
        while not ready() and time() - time0 < 10:
            sleep(0.01)

    # register blueprints
    app.register_blueprint(
        DefaultView(config, ready=ready).get_blueprint(),
        url_prefix="/",
    )
    app.register_blueprint(report_view.get_blueprint(), url_prefix="/")

    return app
