class ImportExtraError(ImportError):
    """A needed package extra has not been installed."""

    def __init__(self, extra_name: str, feature_name: str):
        super().__init__(f"The `{extra_name}` package extra is required to use `{feature_name}`.")
