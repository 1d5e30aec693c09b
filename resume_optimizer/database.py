"""
Database - MongoDB connection management for the Resume Optimizer API

This module owns the lifecycle of the single MongoDB connection:
connect-with-retry against a primary and a fallback endpoint, background
reconnection when pymongo reports the server as lost, and a clean close on
process termination.

The HTTP layer never waits on this module during startup. The initial
connect runs on a background thread and request handlers check
``supervisor.is_connected`` (or catch DatabaseNotConnectedError) instead.
"""

import signal
import sys
import threading
import time
from enum import Enum
from typing import Any, Callable, Dict, Optional

from pymongo import MongoClient, monitoring
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

from resume_optimizer.config import ConnectionSettings
from resume_optimizer.logging_config import get_logger
from resume_optimizer.resilience import retry_fixed_interval

logger = get_logger(__name__)


class ConnectionPhase(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    CLOSED = "closed"


class DatabaseConnectionError(Exception):
    """Base class for connection-level failures."""


class NoReachableInstanceError(DatabaseConnectionError):
    """Raised when neither the primary nor the fallback MongoDB answered."""

    def __init__(self, message: str, last_exception: Optional[BaseException] = None):
        super().__init__(message)
        self.last_exception = last_exception


class DatabaseNotConnectedError(DatabaseConnectionError):
    """Raised when the database handle is requested while disconnected."""


class _ConnectionEventListener(monitoring.ServerHeartbeatListener, monitoring.ServerListener):
    """
    Forwards pymongo monitoring events for one client to the supervisor.

    A listener is bound to a single client. When the supervisor swaps or
    closes that client it deactivates the listener so late events from the
    old client are dropped.
    """

    def __init__(self, supervisor: "ConnectionSupervisor"):
        self._supervisor = supervisor
        self.active = True

    # ServerHeartbeatListener

    def started(self, event):
        pass

    def succeeded(self, event):
        pass

    def failed(self, event):
        if self.active:
            self._supervisor.handle_error(event.reply)

    # ServerListener

    def opened(self, event):
        pass

    def description_changed(self, event):
        if not self.active:
            return
        was_known = event.previous_description.is_server_type_known
        is_known = event.new_description.is_server_type_known
        if was_known and not is_known:
            self._supervisor.handle_disconnected()
        elif is_known and not was_known:
            self._supervisor.handle_connected(self)

    def closed(self, event):
        pass


class ConnectionSupervisor:
    """
    Maintains one live MongoDB connection with bounded fixed-interval retries.

    States:
    - DISCONNECTED: Nothing attempted yet
    - CONNECTING: Initial connect sequence running
    - CONNECTED: Client is live and answered a ping
    - RECONNECTING: Background sequence started by an error/disconnect event
    - CLOSED: shutdown() ran; events are ignored from here on

    Construct once at process start and pass to whatever needs the database.
    """

    def __init__(
        self,
        settings: ConnectionSettings,
        client_factory: Callable[..., MongoClient] = MongoClient,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        """
        Args:
            settings: Endpoints, retry bounds, intervals and client options
            client_factory: Builds a client from (uri, **options); injectable for tests
            sleep: Wait function used between attempts; injectable for tests
        """
        self.settings = settings
        self._client_factory = client_factory
        self._sleep = sleep

        self._lock = threading.Lock()
        self._connected_event = threading.Event()
        self._client: Optional[MongoClient] = None
        self._listener: Optional[_ConnectionEventListener] = None
        self._listeners: Dict[int, _ConnectionEventListener] = {}
        self._active_uri: Optional[str] = None

        self.phase = ConnectionPhase.DISCONNECTED
        self.is_connecting = False
        self.retry_count = 0

    # ===== CONNECT =====

    def _open_client(self, uri: str, options: Dict[str, Any]) -> MongoClient:
        """Create a client for uri and prove it is reachable with a ping."""
        listener = _ConnectionEventListener(self)
        client = self._client_factory(uri, event_listeners=[listener], **options)
        try:
            client.admin.command("ping")
        except Exception:
            listener.active = False
            client.close()
            raise
        self._listeners[id(client)] = listener
        return client

    def connect_with_retry(self, uri: str, options: Optional[Dict[str, Any]] = None) -> MongoClient:
        """
        Connect to uri, retrying at a fixed interval.

        Makes at most ``max_retries + 1`` attempts, then re-raises the last
        error. ``retry_count`` tracks the attempts of this sequence only.

        Args:
            uri: MongoDB connection string
            options: MongoClient keyword options (defaults to settings.client_options)

        Returns:
            A connected MongoClient
        """
        options = self.settings.client_options if options is None else options
        self.retry_count = 0

        def _log_retry(error: BaseException, attempt: int) -> None:
            self.retry_count = attempt
            logger.warning(
                f"Connection attempt {attempt} failed. "
                f"Retrying in {self.settings.retry_interval:g} seconds... ({error})"
            )

        return retry_fixed_interval(
            lambda: self._open_client(uri, options),
            max_retries=self.settings.max_retries,
            interval=self.settings.retry_interval,
            retryable_exceptions=(PyMongoError,),
            on_retry=_log_retry,
            sleep=self._sleep,
        )

    def connect(self) -> None:
        """
        Connect to the primary endpoint, falling back to the secondary.

        Each endpoint gets its own full retry budget. On success the new
        client replaces the previous one.

        Raises:
            NoReachableInstanceError: Neither endpoint could be reached
            PyMongoError: Any other driver error from the last attempt
        """
        logger.info("Connecting to MongoDB...")
        if self.phase == ConnectionPhase.DISCONNECTED:
            self.phase = ConnectionPhase.CONNECTING

        primary = self.settings.primary_uri
        fallback = self.settings.fallback_uri

        try:
            try:
                if not primary:
                    raise ConnectionFailure("MONGO_URI is not configured")
                client = self.connect_with_retry(primary)
                uri = primary
                logger.info("Successfully connected to primary MongoDB")
            except PyMongoError as primary_error:
                if not fallback:
                    raise
                logger.warning(
                    f"Could not connect to primary MongoDB ({primary_error}), trying local fallback..."
                )
                client = self.connect_with_retry(fallback)
                uri = fallback
                logger.info("Successfully connected to local MongoDB")
        except PyMongoError as e:
            if self.phase == ConnectionPhase.CONNECTING:
                self.phase = ConnectionPhase.DISCONNECTED
            logger.error(f"MongoDB Connection Error: {e}")
            if isinstance(e, (ServerSelectionTimeoutError, ConnectionFailure)):
                logger.error("Could not connect to any MongoDB instance (primary or fallback)")
                logger.error("Please ensure either:")
                logger.error("  1. Your MongoDB Atlas IP allowlist includes this host")
                logger.error("  2. Or MongoDB is running locally")
                raise NoReachableInstanceError(
                    "Could not connect to any MongoDB instance (primary or fallback)",
                    last_exception=e,
                ) from e
            raise

        self._mark_connected(client, uri)

    def _mark_connected(self, client: MongoClient, uri: str) -> None:
        listener = self._listeners.pop(id(client), None)
        with self._lock:
            if self.phase == ConnectionPhase.CLOSED:
                # shutdown() won the race
                if listener is not None:
                    listener.active = False
                client.close()
                return

            previous, previous_listener = self._client, self._listener
            self._client = client
            self._listener = listener
            self._active_uri = uri
            self.phase = ConnectionPhase.CONNECTED
            self.is_connecting = False
            self.retry_count = 0
            self._connected_event.set()

        if previous is not None and previous is not client:
            if previous_listener is not None:
                previous_listener.active = False
            try:
                previous.close()
            except PyMongoError as e:
                logger.warning(f"Error closing previous MongoDB client: {e}")

        logger.info("MongoDB Connected Successfully")

    def start(self) -> threading.Thread:
        """
        Run the initial connect() on a background thread.

        A final failure is logged and the API keeps serving in limited mode.
        """

        def _initial_connect():
            try:
                self.connect()
            except Exception as e:
                logger.error("Warning: Failed to connect to MongoDB. API will run in limited mode.")
                logger.error(f"Database Error: {e}")

        thread = threading.Thread(target=_initial_connect, name="mongo-connect", daemon=True)
        thread.start()
        return thread

    # ===== EVENT-DRIVEN RECONNECTION =====

    def handle_error(self, error: Any = None) -> Optional[threading.Thread]:
        """React to an asynchronous connection error by reconnecting immediately."""
        logger.error(f"MongoDB Connection Error: {error}")
        return self._begin_reconnect(delay=0.0)

    def handle_connected(self, listener: _ConnectionEventListener) -> bool:
        """
        React to the live client finding its server again.

        Events from a client that is not the installed one are ignored; a
        new client only becomes live through connect().

        Returns:
            True if the supervisor moved back to CONNECTED
        """
        with self._lock:
            if (
                self.phase in (ConnectionPhase.CLOSED, ConnectionPhase.CONNECTED)
                or self._client is None
                or listener is not self._listener
            ):
                return False
            self.phase = ConnectionPhase.CONNECTED
            self.is_connecting = False
            self._connected_event.set()

        logger.info("MongoDB Connected")
        return True

    def handle_disconnected(self) -> Optional[threading.Thread]:
        """React to a lost connection by reconnecting after reconnect_delay."""
        logger.warning("MongoDB Disconnected. Attempting to reconnect...")
        return self._begin_reconnect(delay=self.settings.reconnect_delay)

    def _begin_reconnect(self, delay: float) -> Optional[threading.Thread]:
        """
        Start a background reconnect sequence unless one is already running.

        Returns:
            The reconnect thread, or None if the event was ignored
        """
        with self._lock:
            if self.is_connecting or self.phase in (ConnectionPhase.CLOSED, ConnectionPhase.CONNECTING):
                return None
            self.is_connecting = True
            self.phase = ConnectionPhase.RECONNECTING
            self._connected_event.clear()

        logger.info("Attempting to reconnect...")
        thread = threading.Thread(
            target=self._reconnect, args=(delay,), name="mongo-reconnect", daemon=True
        )
        thread.start()
        return thread

    def _reconnect(self, delay: float) -> None:
        try:
            if delay:
                self._sleep(delay)
            self.connect()
        except Exception as e:
            logger.error(f"Reconnection failed: {e}")
            with self._lock:
                self.is_connecting = False

    # ===== ACCESS =====

    @property
    def is_connected(self) -> bool:
        return self.phase == ConnectionPhase.CONNECTED and self._client is not None

    @property
    def client(self) -> MongoClient:
        if not self.is_connected:
            raise DatabaseNotConnectedError("Database connection is not ready")
        return self._client

    @property
    def db(self) -> Database:
        """Database handle; named by the URI, else settings.database_name."""
        return self.client.get_default_database(default=self.settings.database_name)

    def wait_until_connected(self, timeout: float = 5.0, poll_interval: float = 1.0) -> bool:
        """
        Block until connected or until timeout seconds have passed.

        Returns:
            True if connected
        """
        deadline = time.monotonic() + timeout
        while not self.is_connected:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            self._connected_event.wait(min(poll_interval, remaining))
        return True

    def status(self) -> Dict[str, Any]:
        """Connection summary for the health endpoint."""
        host = None
        if self._client is not None and self.is_connected:
            try:
                address = self._client.address
                host = f"{address[0]}:{address[1]}" if address else None
            except PyMongoError:
                host = None
        return {
            "phase": self.phase.value,
            "is_connecting": self.is_connecting,
            "endpoint": self._redact(self._active_uri),
            "host": host,
        }

    @staticmethod
    def _redact(uri: Optional[str]) -> Optional[str]:
        """Hide credentials in a MongoDB URI."""
        if not uri or "@" not in uri:
            return uri
        scheme, _, rest = uri.partition("://")
        return f"{scheme}://***@{rest.split('@', 1)[1]}"

    # ===== SHUTDOWN =====

    def close(self) -> None:
        """Close the live client and stop reacting to events."""
        with self._lock:
            client, listener = self._client, self._listener
            self._client = None
            self._listener = None
            self.phase = ConnectionPhase.CLOSED
            self.is_connecting = False
            self._connected_event.clear()

        if listener is not None:
            listener.active = False
        if client is not None:
            client.close()

    def shutdown(self, exit_process: bool = True) -> int:
        """
        Close the connection, then exit with 0 on success or 1 on failure.

        Args:
            exit_process: Call sys.exit with the code (False returns it instead)
        """
        code = 0
        try:
            self.close()
            logger.info("MongoDB connection closed through app termination")
        except Exception as e:
            logger.error(f"Error closing MongoDB connection: {e}")
            code = 1
        finally:
            self.phase = ConnectionPhase.CLOSED

        if exit_process:
            sys.exit(code)
        return code

    def install_signal_handlers(self) -> None:
        """Close the connection and exit on SIGINT/SIGTERM."""

        def _handle(signum, frame):
            logger.info(f"{signal.Signals(signum).name} received. Shutting down gracefully...")
            self.shutdown()

        signal.signal(signal.SIGINT, _handle)
        signal.signal(signal.SIGTERM, _handle)
