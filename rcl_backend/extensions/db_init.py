"""Database initialization-extension."""

from typing import Optional, Iterable
from threading import Thread, Event
from uuid import uuid4
import signal

from dcm_common.services.extensions.common import (
    print_status,
    startup_flask_run,
    add_signal_handler,
    ExtensionLoaderResult,
    _ExtensionRequirement,
)

from rcl_backend import util


def _deployment_flag_set(db, flag: str) -> bool:
    """Returns `True` if `flag` has been recorded in the deployment table."""
    return (
        "deployment" in db.get_table_names().eval("db initialization")
        and len(
            db.get_rows("deployment", True, flag).eval("db initialization")
        )
        > 0
    )


def _db_init(config, db, abort, result, requirements):
    while not _ExtensionRequirement.check_requirements(
        requirements,
        "Initializing database delayed until '{}' is ready.",
    ):
        abort.wait(config.DB_INIT_STARTUP_INTERVAL)
        if abort.is_set():
            return

    # load schema if needed
    if config.DB_LOAD_SCHEMA:
        if not _deployment_flag_set(db, "schema_loaded"):
            print_status(f"Loading SQL-schema file '{config.DB_SCHEMA}'.")
            db.read_file(config.DB_SCHEMA).eval("db initialization")
            db.insert(
                "deployment", {"id": str(uuid4()), "schema_loaded": True}
            ).eval("db initialization")
        else:
            print_status("Skip loading SQL-schema (already initialized).")

    if config.DB_GENERATE_DEMO:
        if not _deployment_flag_set(db, "demo_loaded"):
            util.create_demo_reports(db)
            if not hasattr(config, "TESTING") or not config.TESTING:
                util.DemoData.print()
            db.insert(
                "deployment", {"id": str(uuid4()), "demo_loaded": True}
            ).eval("db initialization")
        else:
            print_status("Skip loading demo (already initialized).")

    print_status("Database initialized.")

    result.ready.set()


def db_init_loader(
    app,
    config,
    db,
    as_process,
    requirements: Optional[Iterable[_ExtensionRequirement]] = None,
) -> ExtensionLoaderResult:
    """
    Register the database initialization extension.

    If `as_process`, the call to `init` is attached to the method
    `app.run` (such that it is automatically executed if the `app` is
    used by running in a separate process via `app.run`). Otherwise, the
    function is executed directly, i.e., in the same process from which
    this process has been called.
    """
    abort = Event()
    result = ExtensionLoaderResult()
    thread = Thread(
        target=_db_init,
        args=(config, db, abort, result, requirements or []),
    )
    result.data = thread
    if as_process:
        # app in separate process via app.run
        startup_flask_run(app, (thread.start,))
    else:
        # app native execution
        thread.start()

    # perform clean shutdown on exit
    def _exit():
        """Terminate connections."""
        abort.set()

    add_signal_handler(signal.SIGINT, _exit)
    add_signal_handler(signal.SIGTERM, _exit)

    return result
