from .deferred import Deferred  # noqa
from .exceptions import (  # noqa
    ConsistencyError,
    InvalidDeclarationError,
    InvalidStructureError,
    JSONAPIGraphException,
    MissingResourceError,
    UnknownRelationKindError,
    UnknownResourceTypeError,
)
from .graph import GraphBuilder, GraphBuilderOptions  # noqa
from .models import Model, ModelRegistry, ToMany, ToOne  # noqa
from .response import COLLECTION, SINGLETON, RetrievalResponse  # noqa
