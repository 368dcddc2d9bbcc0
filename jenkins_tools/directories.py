"""Directory creation with ownership and mode."""

import grp
import os
import pwd
import stat
from pathlib import Path

from .utils import ProvisionError


def ensure_directory(path: Path, owner: str, group: str, mode: int = 0o755) -> bool:
    """
    Ensure a directory exists with the given owner, group and mode.

    Args:
        path: Directory path
        owner: Owning user name
        group: Owning group name
        mode: Permission bits

    Returns:
        True if the directory was created or its ownership/mode changed

    Raises:
        ProvisionError: If the user or group does not exist, or path is a file
    """
    try:
        uid = pwd.getpwnam(owner).pw_uid
    except KeyError as e:
        raise ProvisionError(f"Unknown user '{owner}'") from e
    try:
        gid = grp.getgrnam(group).gr_gid
    except KeyError as e:
        raise ProvisionError(f"Unknown group '{group}'") from e

    changed = False
    if not path.exists():
        path.mkdir(parents=True)
        changed = True
    elif not path.is_dir():
        raise ProvisionError(f"Path exists and is not a directory: {path}")

    st = path.stat()
    if (st.st_uid, st.st_gid) != (uid, gid):
        os.chown(path, uid, gid)
        changed = True
    if stat.S_IMODE(st.st_mode) != mode:
        path.chmod(mode)
        changed = True

    if changed:
        print(f"Ensured directory {path} ({owner}:{group}, {oct(mode)})")
    return changed
