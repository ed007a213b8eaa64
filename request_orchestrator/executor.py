"""
Request Executor

Performs one HTTP call for a descriptor producer and translates its outcome
into a follow-up action dispatched into the store.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from shared.errors import ResponseError
from shared.schemas import CallDescriptor, Outcome, TransportResponse
from shared.transport import HttpTransport
from request_orchestrator.descriptor import descriptor_from_action
from request_orchestrator.markers import Producer, action_with

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedCall:
    """A producer's action together with its extracted descriptor"""
    action: Mapping[str, Any]
    descriptor: CallDescriptor


class RequestExecutor:
    """
    Executes single requests on behalf of the orchestrators.

    ``send`` never raises for transport or application failures: both are
    reported as an error Outcome and, when configured, an error action.
    """

    def __init__(
        self,
        transport: HttpTransport,
        dispatch: Callable[[Dict[str, Any]], Any],
        get_state: Callable[[], Any]
    ):
        """
        Initialize request executor.

        Args:
            transport: HTTP transport used for every request
            dispatch: Store dispatch function for follow-up actions
            get_state: Store state accessor handed to after hooks
        """
        self.transport = transport
        self.dispatch = dispatch
        self.get_state = get_state

    def prepare(self, producer: Producer, previous: Optional[Outcome] = None) -> PreparedCall:
        """
        Invoke a producer and extract the descriptor of the action it returns.

        Raises:
            DescriptorError: If the produced action does not describe a call
            Exception: Whatever the producer itself raises
        """
        action = producer(previous)
        return PreparedCall(action=action, descriptor=descriptor_from_action(action))

    async def execute(self, producer: Producer, previous: Optional[Outcome] = None) -> Outcome:
        """Prepare and send the call described by a producer"""
        return await self.send(self.prepare(producer, previous))

    def bind(self, producer: Producer) -> Callable[[Optional[Outcome]], Awaitable[Outcome]]:
        """Return a callable running this producer with a given previous outcome"""
        async def run(previous: Optional[Outcome] = None) -> Outcome:
            return await self.execute(producer, previous)
        return run

    async def send(self, prepared: PreparedCall) -> Outcome:
        """
        Issue the request and settle it.

        Args:
            prepared: Prepared call

        Returns:
            Outcome.success(body) for a 200 response, Outcome.failure(error)
            for anything else
        """
        descriptor = prepared.descriptor
        logger.info(f"{descriptor.method.upper()} {descriptor.url}")

        try:
            response = await self.transport.request(
                descriptor.method,
                descriptor.url,
                params=descriptor.query,
                data=descriptor.body
            )
        except Exception as e:
            logger.warning(f"{descriptor.method.upper()} {descriptor.url} failed: {e!r}")
            return self._handle_error(prepared, e)

        if response.status != 200:
            logger.warning(f"{descriptor.method.upper()} {descriptor.url} returned {response.status}")
            return self._handle_error(prepared, self.error_from_response(response))

        return self._handle_success(prepared, response.data)

    @staticmethod
    def error_from_response(response: TransportResponse) -> Any:
        """
        Error value for a non-200 response.

        The body's status_message when present, otherwise a ResponseError.
        """
        if isinstance(response.data, Mapping) and "status_message" in response.data:
            return response.data["status_message"]
        return ResponseError(response.status, response.data)

    def _handle_success(self, prepared: PreparedCall, body: Any) -> Outcome:
        descriptor = prepared.descriptor

        if descriptor.success_type:
            self._dispatch(action_with(prepared.action, type=descriptor.success_type, res=body))
        if callable(descriptor.after_success):
            self._run_hook(descriptor.after_success, result=body)

        return Outcome.success(body)

    def _handle_error(self, prepared: PreparedCall, error: Any) -> Outcome:
        descriptor = prepared.descriptor

        if descriptor.error_type:
            self._dispatch(action_with(prepared.action, type=descriptor.error_type, err=error))
        if callable(descriptor.after_error):
            self._run_hook(descriptor.after_error, error=error)

        return Outcome.failure(error)

    def _dispatch(self, action: Dict[str, Any]) -> None:
        try:
            self.dispatch(action)
        except Exception:
            logger.exception(f"Dispatch of {action.get('type')!r} raised")

    def _run_hook(self, hook: Callable[..., Any], **payload: Any) -> None:
        try:
            hook(get_state=self.get_state, **payload)
        except Exception:
            logger.exception(f"After hook {hook!r} raised")
