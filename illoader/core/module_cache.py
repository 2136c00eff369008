import hashlib
import logging
import os
from typing import Dict, List, Optional

from illoader.config import DEFAULT_HASH_ALGORITHM, SIGNATURE_CHUNK_SIZE, validate_hash_algorithm
from illoader.exceptions import InternalLoaderError

logger = logging.getLogger(__name__)


class ModuleCache:
    """
    Maps canonical absolute module paths to the signature of the content they had
    when they were last checked. It decides whether a module needs (re)loading.
    """

    def __init__(self, hash_algorithm: str = DEFAULT_HASH_ALGORITHM):
        self.hash_algorithm = validate_hash_algorithm(hash_algorithm)
        self._signatures: Dict[str, Optional[str]] = {}

    def compute_signature(self, absolute_path: str) -> Optional[str]:
        """
        Returns the hex digest of the file's current bytes, or None if the file cannot be read.
        None never counts as equal to a stored signature, so unreadable files are always reloaded.
        """
        digest = hashlib.new(self.hash_algorithm)
        try:
            with open(absolute_path, "rb") as f:
                for chunk in iter(lambda: f.read(SIGNATURE_CHUNK_SIZE), b""):
                    digest.update(chunk)
        except OSError as e:
            logger.debug("Could not compute signature of '%s': %s", absolute_path, e)
            return None
        return digest.hexdigest()

    def is_loaded(self, absolute_path: str) -> bool:
        """
        Records the current signature of `absolute_path` and reports whether it matches the
        previous one. The new signature is stored whether or not the module later loads.
        """
        self._check_key(absolute_path)
        signature = self.compute_signature(absolute_path)
        previous = self._signatures.get(absolute_path)
        self._signatures[absolute_path] = signature
        return previous is not None and previous == signature

    def signature_of(self, absolute_path: str) -> Optional[str]:
        return self._signatures.get(absolute_path)

    def forget(self, absolute_path: str) -> bool:
        if absolute_path not in self._signatures:
            return False
        del self._signatures[absolute_path]
        return True

    def reset(self) -> None:
        self._signatures.clear()

    def paths(self) -> List[str]:
        return [path for path, signature in self._signatures.items() if signature is not None]

    def __contains__(self, absolute_path: str) -> bool:
        return self._signatures.get(absolute_path) is not None

    def __len__(self) -> int:
        return len(self.paths())

    @staticmethod
    def _check_key(path: str) -> None:
        if not os.path.isabs(path) or os.path.normpath(path) != path:
            raise InternalLoaderError(f"Module cache keys must be canonical absolute paths, got '{path}'.")
