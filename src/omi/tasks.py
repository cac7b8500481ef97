"""
Metadata tasks.

Each task wraps exactly one IOMI query. Tasks are looked up by name in TASKS,
check their extra command line arguments before any connection is made, and
run against a connected Session.
"""

import logging
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from typing import Dict, List, NamedTuple, Sequence, Tuple, Type

from .exceptions import RemoteError, UnknownTaskError, WrongArgCountError
from .remote import MetadataService, OMIFlags, Session

logger = logging.getLogger(__name__)

FOUNDATION_REPOSITORY = "Foundation"
FOUNDATION_REPOSITORY_TYPE = "FOUNDATION"


class RawResponse(NamedTuple):
    """Unformatted XML returned by a remote call and its return code."""
    xml: str
    status: int


class OMITask(ABC):
    """
    Base class for metadata tasks.

    Subclasses set ``name``, ``arg_names`` and ``description`` and implement
    :meth:`call`.
    """

    name: str = ""
    method: str = ""
    arg_names: Tuple[str, ...] = ()
    description: str = ""
    flags: int = 0
    options: str = ""

    def __init__(self):
        self.args: Tuple[str, ...] = ()

    @property
    def required_args(self) -> int:
        return len(self.arg_names)

    def validate_extra_args(self, args: Sequence[str]) -> None:
        """
        Check and bind the task-specific positional arguments.

        Raises:
            WrongArgCountError: If the number of arguments is not required_args
        """
        if len(args) != self.required_args:
            raise WrongArgCountError(self.name, self.required_args, len(args), self.arg_names)
        self.args = tuple(args)

    def execute(self, session: Session) -> RawResponse:
        """
        Run the remote query on a connected session.

        Returns:
            RawResponse: The XML response and return code

        Raises:
            RemoteError: If the remote call fails
        """
        if session.service is None:
            raise RemoteError(f"Cannot run {self.name} on a closed session")

        if self.args:
            logger.info("Running IOMI %s method for %s.", self.method, self._describe_args())
        else:
            logger.info("Running IOMI %s method.", self.method)

        xml, rc = self.call(session.service)

        logger.info(
            "Successfully run IOMI %s method. Return code=%s. XML response follows:", self.method, rc
        )
        return RawResponse(xml, rc)

    def _describe_args(self) -> str:
        return " and ".join(f"{label} '{value}'" for label, value in zip(self.arg_names, self.args))

    @abstractmethod
    def call(self, service: MetadataService) -> Tuple[str, int]:
        """Issue the IOMI call for this task."""


class GetRepositoriesTask(OMITask):
    name = "GetRepositories"
    method = "GetRepositories"
    description = "List the metadata repositories managed by the server"
    flags = OMIFlags.ALL

    def call(self, service):
        return service.get_repositories(self.flags, self.options)


class GetNamespacesTask(OMITask):
    name = "GetNamespaces"
    method = "GetNamespaces"
    description = "List the namespaces known to the server"

    def call(self, service):
        return service.get_namespaces(self.flags, self.options)


class GetTypesTask(OMITask):
    name = "GetTypes"
    method = "GetTypes"
    arg_names = ("namespace",)
    description = "List the metadata types in a namespace (SAS|REPOS)"

    def call(self, service):
        ns, = self.args
        return service.get_types(ns, self.flags, self.options)


class GetSubtypesTask(OMITask):
    name = "GetSubtypes"
    method = "GetSubtypes"
    arg_names = ("namespace", "model type")
    description = "List the subtypes of a model type"

    def call(self, service):
        ns, model_type = self.args
        return service.get_subtypes(model_type, ns, self.flags, self.options)


class GetTypePropertiesTask(OMITask):
    name = "GetTypeProperties"
    method = "GetTypeProperties"
    arg_names = ("namespace", "model type")
    description = "List the attributes and associations of a model type"

    def call(self, service):
        ns, model_type = self.args
        return service.get_type_properties(model_type, ns, self.flags, self.options)


class GetMetadataObjectsTask(OMITask):
    name = "GetMetadataObjects"
    method = "GetMetadataObjects"
    arg_names = ("namespace", "model type")
    description = "List the metadata objects of a model type in the foundation repository"
    flags = (
        OMIFlags.DEPENDENCY_USED_BY
        | OMIFlags.DEPENDENCY_USES
        | OMIFlags.GET_METADATA
        | OMIFlags.INCLUDE_SUBTYPES
        | OMIFlags.ALL
        | OMIFlags.ALL_SIMPLE
        | OMIFlags.SUCCINCT
    )

    def call(self, service):
        ns, model_type = self.args
        foundation_id = resolve_foundation_repository_id(service)
        return service.get_metadata_objects(foundation_id, model_type, ns, self.flags, self.options)


def resolve_foundation_repository_id(service: MetadataService) -> str:
    """
    Find the id of the foundation repository.

    Raises:
        RemoteError: If the repository list is unreadable or has no foundation repository
    """
    xml, rc = service.get_repositories(OMIFlags.ALL, "")
    try:
        root = ET.fromstring(xml)
    except (ET.ParseError, TypeError) as e:
        raise RemoteError(f"Unreadable repository list: {e}", status=rc) from e

    repositories = [r for r in root.iter("Repository") if r.get("Id")]
    # RepositoryType match takes precedence over Name
    for key, value in (("RepositoryType", FOUNDATION_REPOSITORY_TYPE), ("Name", FOUNDATION_REPOSITORY)):
        for repository in repositories:
            if repository.get(key) == value:
                logger.debug("Foundation repository id is %s", repository.get("Id"))
                return repository.get("Id")

    raise RemoteError("The metadata server has no foundation repository", status=rc)


TASKS: Dict[str, Type[OMITask]] = {
    task.name: task
    for task in (
        GetRepositoriesTask,
        GetNamespacesTask,
        GetTypesTask,
        GetSubtypesTask,
        GetTypePropertiesTask,
        GetMetadataObjectsTask,
    )
}


def task_names() -> List[str]:
    return sorted(TASKS)


def get_task(name: str) -> OMITask:
    """
    Create the task registered under name.

    Raises:
        UnknownTaskError: If no task has that name
    """
    try:
        return TASKS[name]()
    except KeyError:
        raise UnknownTaskError(name, TASKS) from None
