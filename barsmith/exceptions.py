class BarsmithError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(BarsmithError):
    # errors related to configuration files and profiles.
    pass

class OutputError(BarsmithError):
    # errors during output operations.
    pass

class LoadError(BarsmithError):
    # errors while building the context from data files.
    def __init__(self, path, message: str):
        super().__init__(message)
        self.path = path

class PathNotFoundError(LoadError):
    def __init__(self, path):
        super().__init__(path, f"The path {path} does not exist.")

class UnsupportedExtensionError(LoadError):
    def __init__(self, path, extension: str):
        super().__init__(
            path,
            f"Unrecognized context file extension '{extension}' for {path}. "
            "Files must be .json, .yaml, .yml or .plist.",
        )
        self.extension = extension

class ParseError(LoadError):
    def __init__(self, path, reason: str):
        super().__init__(path, f"The file at {path} could not be read: {reason}")
        self.reason = reason

class RenderError(BarsmithError):
    # errors related to template loading and rendering.
    pass

class TemplateNotFoundError(RenderError):
    pass

class TemplateSyntaxError(RenderError):
    pass

class EvaluationError(RenderError):
    # helper or lookup failures while the template runs.
    pass
