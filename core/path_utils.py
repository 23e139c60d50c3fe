# core/path_utils.py

import os

DEFAULT_DATA_FILENAME = "students.json"


def get_default_data_dir() -> str:
    """
    Returns the default directory for Gradebook data: `~/Documents/Gradebooks`.
    """
    documents = os.path.join(os.path.expanduser("~"), "Documents")
    return os.path.join(documents, "Gradebooks")


def resolve_data_path(user_input: str | None = None) -> str:
    """
    Resolves the path of the file a `Gradebook` reads from and writes to.

    Args:
        user_input (str | None): An optional user-specified file or directory path. If None or blank, the default path is used.

    Returns:
        A resolved path string. If user input is provided, it is stripped and expanded; if it names an existing
        directory, `students.json` inside that directory is used. Otherwise, defaults to:
        `~/Documents/Gradebooks/students.json`.

    Notes:
        - Does not touch the filesystem beyond checking whether the input is an existing directory.
    """
    if user_input is not None and user_input.strip():
        path = os.path.expanduser(user_input.strip())

        if os.path.isdir(path):
            return os.path.join(path, DEFAULT_DATA_FILENAME)

        return path

    return os.path.join(get_default_data_dir(), DEFAULT_DATA_FILENAME)


def ensure_parent_dir(file_path: str) -> None:
    """
    Creates the parent directory of `file_path` (including intermediate directories) if it does not exist.

    Raises:
        OSError: If the directory cannot be created, e.g. when a path component is a regular file.
    """
    parent = os.path.dirname(os.path.abspath(file_path))
    os.makedirs(parent, exist_ok=True)
