def label_selector(labels: dict[str, str]) -> str:
    """``{"a": "1", "b": "2"}`` -> ``a=1,b=2``."""
    return ",".join(f"{key}={value}" for key, value in labels.items())
