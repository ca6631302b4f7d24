"""Custom exception classes for the knowledge base retrieval server."""


class RAGError(Exception):
    """Base exception for all retrieval-related errors."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize RAG error.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(RAGError):
    """Exception raised when the environment configuration is invalid."""
    pass


class KnowledgeBaseError(RAGError):
    """Exception raised when knowledge base operations fail."""
    pass


class ValidationError(RAGError):
    """Exception raised when tool arguments fail validation."""
    pass


class MissingIdentifierError(ValidationError):
    """Exception raised when no knowledge base ID can be resolved."""
    pass


class UnknownToolError(RAGError):
    """Exception raised when a tool call names an unsupported tool."""
    pass
