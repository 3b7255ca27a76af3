"""
Thin wrapper over the boto3 Amazon Connect client.
"""

import logging
import time
from typing import List, Dict, Any, Optional

from ..models.exceptions import TransportError
from ..models.resources import DetailCall, ResourceKind, INSTANCE_PAGE_SIZE
from .error_handler import ErrorHandler
from .logging import LoggingService


logger = logging.getLogger(__name__)


class ConnectClient:
    """Issues single-page list calls and describe calls against one Connect client."""

    SERVICE = 'connect'

    def __init__(self, client: Any, error_handler: Optional[ErrorHandler] = None,
                 logging_service: Optional[LoggingService] = None):
        """
        Args:
            client: boto3 ``connect`` client
            error_handler: Converts botocore errors into export exceptions
            logging_service: Records every API call in the run log
        """
        self._client = client
        self.error_handler = error_handler or ErrorHandler()
        self.logging_service = logging_service

    def list_instances(self) -> List[Dict[str, Any]]:
        """List the instances visible to the credentials (single page)."""
        response = self._call('list_instances', MaxResults=INSTANCE_PAGE_SIZE)
        self._warn_if_truncated('list_instances', response)
        return response.get('InstanceSummaryList', [])

    def describe_instance(self, instance_id: str) -> Dict[str, Any]:
        response = self._call('describe_instance', InstanceId=instance_id)
        return response.get('Instance', {})

    def list_summaries(self, kind: ResourceKind, instance_id: str, page_size: int) -> List[Dict[str, Any]]:
        """
        List the summaries of one resource kind.

        Only one page of at most ``page_size`` entries is requested; larger
        collections are truncated and the truncation is logged.

        Args:
            kind: Resource kind to list
            instance_id: Instance id
            page_size: MaxResults for the call

        Returns:
            List[Dict[str, Any]]: Summaries in the order returned by the API

        Raises:
            TransportError: If the call fails
        """
        response = self._call(kind.list_operation, InstanceId=instance_id, MaxResults=page_size)
        self._warn_if_truncated(kind.list_operation, response)
        return response.get(kind.list_key, [])

    def describe(self, call: DetailCall, instance_id: str, resource_id: str) -> Any:
        """
        Fetch the detail payload of one resource.

        Args:
            call: Detail call to make
            instance_id: Instance id
            resource_id: Id of the resource

        Returns:
            Any: The payload found under the call's result key

        Raises:
            TransportError: If the call fails or returns no payload
        """
        params = {'InstanceId': instance_id, call.id_param: resource_id}
        if call.max_results:
            params['MaxResults'] = call.max_results

        response = self._call(call.operation, **params)
        if call.max_results:
            self._warn_if_truncated(call.operation, response)

        if call.result_key not in response:
            raise TransportError(
                f"{self.SERVICE}.{call.operation} response has no '{call.result_key}'",
                context={'operation': call.operation, 'resource_id': resource_id}
            )
        return response[call.result_key]

    def _call(self, operation: str, **params) -> Dict[str, Any]:
        """Invoke one API operation, logging it and converting failures."""
        start_time = time.time()
        try:
            response = getattr(self._client, operation)(**params)
        except Exception as e:
            self._log_call(operation, False, time.time() - start_time, params, error=e)
            raise self.error_handler.handle_api_error(e, operation, self.SERVICE) from e

        self._log_call(operation, True, time.time() - start_time, params)
        return response

    def _log_call(self, operation: str, success: bool, duration: float,
                  params: Dict[str, Any], error: Optional[Exception] = None) -> None:
        context: Dict[str, Any] = {'parameters': params}
        if error is not None:
            context['error_message'] = str(error)

        if self.logging_service is not None:
            self.logging_service.log_aws_api_call(self.SERVICE, operation, success, duration, context)
        elif success:
            logger.debug(f"{self.SERVICE}.{operation} {params}")

    def _warn_if_truncated(self, operation: str, response: Dict[str, Any]) -> None:
        if response.get('NextToken'):
            logger.warning(
                f"{operation} returned more results than one page; the remainder is not exported",
                extra={'context': {'operation': operation}}
            )
