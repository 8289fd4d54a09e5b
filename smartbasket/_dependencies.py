import importlib
import importlib.util
import types

# module name -> pip extra that pulls it in
_EXTRAS = {
    "polars": "polars",
    "pyarrow": "arrow",
}


def import_optional_dependency(name: str, purpose: str = "") -> types.ModuleType:
    """
    Import an optional dependency, or fail with an installation hint.

    Parameters
    ----------
    name : str
        The module name, e.g. ``"polars"``.
    purpose : str
        What the caller needs the module for; appended to the error message.

    Raises
    ------
    ImportError
        If the module is not installed.
    """
    package_name = name.split(".")[0]
    if importlib.util.find_spec(package_name) is None:
        extra = _EXTRAS.get(package_name)
        hint = f"pip install 'smartbasket[{extra}]'" if extra else f"pip install {package_name}"
        msg = f"Missing optional dependency '{package_name}'. Install it with `{hint}`."
        if purpose:
            msg += f" Needed for {purpose}."
        raise ImportError(msg)
    return importlib.import_module(name)
