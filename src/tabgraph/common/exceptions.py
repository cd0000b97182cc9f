"""
Custom exception hierarchy for the tabgraph library.

This module defines the exceptions raised by graph construction, mutation,
query and aggregation functions. Every exception carries a human-readable
message plus optional structured details and context for programmatic
handling.

Hierarchy
---------
GraphError
├── ValidationError
│   ├── LengthMismatchError
│   ├── ColumnNotFoundError
│   ├── ColumnIndexOutOfRangeError
│   ├── MinimumSizeError
│   ├── NodeNotFoundError
│   ├── EdgeNotFoundError
│   └── DataFormatError
├── InvalidGraphObjectError
├── GraphConstructionError
│   └── DirectedMismatchError
├── ConfigurationError
│   └── UnsupportedAggregationError
└── ComputationError
"""

from typing import Dict, Any, Optional, List, Union
import traceback


class GraphError(Exception):
    """
    Base exception for all tabgraph errors.

    Parameters
    ----------
    message : str
        Human-readable error message describing what went wrong
    details : Dict[str, Any], optional
        Additional structured information about the error
    cause : Exception, optional
        The underlying exception that caused this error
    context : Dict[str, Any], optional
        Additional context about the operation that failed

    Examples
    --------
    >>> raise GraphError("Graph construction failed")
    >>> raise GraphError(
    ...     "Invalid graph size",
    ...     details={"nodes": 0, "edges": 10}
    ... )
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        self.message = message
        self.details = details or {}
        self.cause = cause
        self.context = context or {}

        full_message = message

        if self.details:
            detail_parts = []
            for key, value in self.details.items():
                if isinstance(value, (list, dict)) and len(str(value)) > 100:
                    # Truncate long collections
                    detail_parts.append(f"{key}=<{type(value).__name__} with {len(value)} items>")
                else:
                    detail_parts.append(f"{key}={value}")

            if detail_parts:
                full_message += f" (Details: {', '.join(detail_parts)})"

        if self.context:
            context_parts = [f"{k}={v}" for k, v in self.context.items()]
            if context_parts:
                full_message += f" (Context: {', '.join(context_parts)})"

        super().__init__(full_message)

        if cause is not None:
            self.__cause__ = cause

    def add_context(self, **kwargs: Any) -> 'GraphError':
        """
        Add additional context to the exception.

        Parameters
        ----------
        **kwargs
            Key-value pairs to add to the context

        Returns
        -------
        GraphError
            Self, for method chaining
        """
        self.context.update(kwargs)
        return self

    def get_debug_info(self) -> Dict[str, Any]:
        """
        Get comprehensive debugging information.

        Returns
        -------
        Dict[str, Any]
            Dictionary containing all available error information
        """
        return {
            "exception_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
            "traceback": traceback.format_exc() if hasattr(self, '__traceback__') else None
        }


class ValidationError(GraphError):
    """
    Exception raised for input validation errors.

    Raised before any table is modified, so a failing call never leaves
    a partially updated graph behind.

    Parameters
    ----------
    message : str
        Descriptive error message explaining the validation failure
    field : str, optional
        Name of the field, column or parameter that failed validation
    value : Any, optional
        The invalid value that caused the error
    expected : str, optional
        Description of what was expected
    details : Dict[str, Any], optional
        Additional details about the validation failure

    Examples
    --------
    >>> raise ValidationError("Edge references unknown node", field="from")
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        expected: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> None:
        self.field = field
        self.value = value
        self.expected = expected

        enhanced_details = details or {}
        if field is not None:
            enhanced_details["field"] = field
        if value is not None:
            enhanced_details["invalid_value"] = value
        if expected is not None:
            enhanced_details["expected"] = expected

        if field:
            enhanced_message = f"Validation error in field '{field}': {message}"
        else:
            enhanced_message = f"Validation error: {message}"

        super().__init__(enhanced_message, details=enhanced_details, **kwargs)


class LengthMismatchError(ValidationError):
    """
    Exception raised when an attribute vector does not match the row count.

    Parameters
    ----------
    message : str
        Description of the mismatch
    field : str, optional
        Name of the attribute whose length is wrong
    expected_length : int, optional
        Required number of values
    actual_length : int, optional
        Number of values supplied

    Examples
    --------
    >>> raise LengthMismatchError(
    ...     "Attribute vector has the wrong length",
    ...     field="value",
    ...     expected_length=4,
    ...     actual_length=3
    ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected_length: Optional[int] = None,
        actual_length: Optional[int] = None,
        **kwargs
    ) -> None:
        self.expected_length = expected_length
        self.actual_length = actual_length

        details = kwargs.pop("details", None) or {}
        if expected_length is not None:
            details["expected_length"] = expected_length
        if actual_length is not None:
            details["actual_length"] = actual_length

        super().__init__(message, field=field, details=details, **kwargs)


class ColumnNotFoundError(ValidationError):
    """Exception raised when a named column is absent from a table."""

    def __init__(
        self,
        message: str,
        column: Optional[str] = None,
        available: Optional[List[str]] = None,
        **kwargs
    ) -> None:
        self.column = column
        self.available = available or []

        details = kwargs.pop("details", None) or {}
        if available is not None:
            details["available_columns"] = available

        super().__init__(message, field=column, details=details, **kwargs)


class ColumnIndexOutOfRangeError(ValidationError):
    """Exception raised when a positional column index exceeds the table width."""

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        n_columns: Optional[int] = None,
        **kwargs
    ) -> None:
        self.index = index
        self.n_columns = n_columns

        details = kwargs.pop("details", None) or {}
        if index is not None:
            details["index"] = index
        if n_columns is not None:
            details["n_columns"] = n_columns

        super().__init__(message, details=details, **kwargs)


class MinimumSizeError(ValidationError):
    """
    Exception raised when a shape constructor is asked for too few nodes.

    Examples
    --------
    >>> raise MinimumSizeError("A star needs at least 4 nodes", minimum=4, value=3)
    """

    def __init__(
        self,
        message: str,
        minimum: Optional[int] = None,
        **kwargs
    ) -> None:
        self.minimum = minimum

        details = kwargs.pop("details", None) or {}
        if minimum is not None:
            details["minimum"] = minimum

        kwargs.setdefault("field", "n")
        super().__init__(message, details=details, **kwargs)


class NodeNotFoundError(ValidationError):
    """Exception raised when a node id is not present in the node table."""


class EdgeNotFoundError(ValidationError):
    """Exception raised when an edge id or endpoint pair is not present in the edge table."""


class DataFormatError(ValidationError):
    """
    Exception raised for data format and structure errors.

    This is a specialized ValidationError for issues specifically related
    to snapshot files, table schemas or other on-disk formats.

    Parameters
    ----------
    message : str
        Description of the format error
    format_type : str, optional
        Expected format (e.g., "parquet", "json", "DataFrame")
    file_path : str, optional
        Path to the problematic file
    line_number : int, optional
        Line number where error occurred (for file parsing)
    """

    def __init__(
        self,
        message: str,
        format_type: Optional[str] = None,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
        **kwargs
    ) -> None:
        details = kwargs.pop("details", None) or {}

        if format_type:
            details["format_type"] = format_type
        if file_path:
            details["file_path"] = file_path
        if line_number is not None:
            details["line_number"] = line_number

        super().__init__(message, details=details, **kwargs)


class InvalidGraphObjectError(GraphError):
    """
    Exception raised when a graph container is malformed.

    Covers a non-Graph argument, missing or non-DataFrame tables, missing
    required columns, duplicate ids, dangling edge endpoints and counters
    that fall below the largest allocated id.

    Parameters
    ----------
    message : str
        Description of the structural problem
    component : str, optional
        Which part of the container is invalid (e.g. "nodes_df", "last_node")
    """

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        **kwargs
    ) -> None:
        self.component = component

        context = kwargs.pop("context", None) or {}
        if component:
            context["component"] = component

        super().__init__(message, context=context, **kwargs)


class GraphConstructionError(GraphError):
    """
    Exception raised during graph construction and composition.

    Parameters
    ----------
    message : str
        Description of the graph construction error
    graph_type : str, optional
        Type of graph being constructed (e.g., "directed", "undirected")
    node_count : int, optional
        Number of nodes in the graph when error occurred
    edge_count : int, optional
        Number of edges processed when error occurred
    operation : str, optional
        Specific operation that failed (e.g., "combine_graphs", "add_star")
    """

    def __init__(
        self,
        message: str,
        graph_type: Optional[str] = None,
        node_count: Optional[int] = None,
        edge_count: Optional[int] = None,
        operation: Optional[str] = None,
        **kwargs
    ) -> None:
        self.graph_type = graph_type
        self.node_count = node_count
        self.edge_count = edge_count
        self.operation = operation

        context = kwargs.pop("context", None) or {}
        if graph_type:
            context["graph_type"] = graph_type
        if node_count is not None:
            context["node_count"] = node_count
        if edge_count is not None:
            context["edge_count"] = edge_count
        if operation:
            context["operation"] = operation

        super().__init__(message, context=context, **kwargs)


class DirectedMismatchError(GraphConstructionError):
    """
    Exception raised when combining a directed graph with an undirected one.

    Examples
    --------
    >>> raise DirectedMismatchError(
    ...     "Cannot combine graphs with different directedness",
    ...     operation="combine_graphs",
    ...     details={"base_directed": True, "incoming_directed": False}
    ... )
    """


class ConfigurationError(GraphError):
    """
    Exception raised for invalid configuration or parameter values.

    Parameters
    ----------
    message : str
        Description of the configuration error
    parameter : str, optional
        Name of the problematic parameter
    value : Any, optional
        The invalid parameter value
    valid_options : List[Any], optional
        List of valid options for the parameter
    function : str, optional
        Name of the function where the error occurred

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "Invalid attribute type",
    ...     parameter="attr_type",
    ...     value="vertex",
    ...     valid_options=["graph", "node", "edge"]
    ... )
    """

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        value: Optional[Any] = None,
        valid_options: Optional[List[Any]] = None,
        function: Optional[str] = None,
        **kwargs
    ) -> None:
        self.parameter = parameter
        self.value = value
        self.valid_options = valid_options
        self.function = function

        details = kwargs.get('details') or {}
        if parameter:
            details["parameter"] = parameter
        if value is not None:
            details["invalid_value"] = value
        if valid_options:
            details["valid_options"] = valid_options
        if function:
            details["function"] = function

        enhanced_message = message
        if parameter and valid_options:
            enhanced_message += f". Valid options for '{parameter}': {valid_options}"

        kwargs["details"] = details
        super().__init__(enhanced_message, **kwargs)


class UnsupportedAggregationError(ConfigurationError):
    """Exception raised for an aggregation function name outside the supported set."""


class ComputationError(GraphError):
    """
    Exception raised when a delegated graph computation fails.

    Parameters
    ----------
    message : str
        Description of the computational error
    operation : str, optional
        The computational operation that failed
    error_type : str, optional
        Type of computational error (e.g., "networkit", "io")
    resource_info : Dict[str, Any], optional
        Information about the graph when the error occurred

    Examples
    --------
    >>> raise ComputationError(
    ...     "Core decomposition failed",
    ...     operation="get_coreness",
    ...     error_type="networkit",
    ...     resource_info={"nodes": 10, "edges": 22}
    ... )
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        error_type: Optional[str] = None,
        resource_info: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> None:
        self.operation = operation
        self.error_type = error_type
        self.resource_info = resource_info or {}

        context = {}
        if operation:
            context["operation"] = operation
        if error_type:
            context["error_type"] = error_type

        details = kwargs.get('details') or {}
        details.update(self.resource_info)

        kwargs["details"] = details
        kwargs["context"] = context

        super().__init__(message, **kwargs)


# Convenience functions for common error patterns

def validate_parameter(
    value: Any,
    valid_options: List[Any],
    parameter_name: str,
    function_name: Optional[str] = None
) -> None:
    """
    Validate that a parameter value is in the list of valid options.

    Parameters
    ----------
    value : Any
        The parameter value to validate
    valid_options : List[Any]
        List of valid options
    parameter_name : str
        Name of the parameter
    function_name : str, optional
        Name of the function being called

    Raises
    ------
    ConfigurationError
        If value is not in valid_options
    """
    if value not in valid_options:
        raise ConfigurationError(
            f"Invalid value for parameter '{parameter_name}': {value}",
            parameter=parameter_name,
            value=value,
            valid_options=valid_options,
            function=function_name
        )


def require_positive(
    value: Union[int, float],
    parameter_name: str,
    allow_zero: bool = False
) -> None:
    """
    Validate that a numeric parameter is positive.

    Parameters
    ----------
    value : Union[int, float]
        The numeric value to validate
    parameter_name : str
        Name of the parameter
    allow_zero : bool, default False
        Whether to allow zero values

    Raises
    ------
    ValidationError
        If value is not positive (or non-negative if allow_zero=True)
    """
    if allow_zero and value < 0:
        raise ValidationError(
            f"Parameter must be non-negative, got {value}",
            field=parameter_name,
            value=value
        )
    elif not allow_zero and value <= 0:
        raise ValidationError(
            f"Parameter must be positive, got {value}",
            field=parameter_name,
            value=value
        )
