"""
Reading the state DevSpace leaves behind in the workspace.

DevSpace keeps run state in `.devspace/generated.yaml`. The format is not a
public interface, but each profile records the namespace it last deployed to:

    profiles:
      "":
        lastContext:
          namespace: web
          context: kind-kind
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from syncwand.exceptions import StateFileMalformed, StateFileUnavailable

logger = logging.getLogger(__name__)

STATE_FILE = Path(".devspace") / "generated.yaml"


class LastContext(BaseModel):
    namespace: str | None = None
    context: str | None = None

    @field_validator("namespace", "context", mode="before")
    @classmethod
    def _scalar_to_str(cls, v):
        # YAML reads unquoted names like `2024` or `true` as non-strings
        if isinstance(v, (bool, int, float)):
            return str(v).lower() if isinstance(v, bool) else str(v)
        return v


class Profile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    last_context: LastContext | None = Field(default=None, alias="lastContext")


class GeneratedState(BaseModel):
    """Subset of `.devspace/generated.yaml` that syncwand cares about."""

    profiles: dict[str, Profile | None] = Field(default_factory=dict)

    @field_validator("profiles", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return {} if v is None else v

    def namespaces(self) -> set[str]:
        namespaces: set[str] = set()
        for profile in self.profiles.values():
            if profile and profile.last_context and profile.last_context.namespace:
                namespaces.add(profile.last_context.namespace)
        return namespaces


def load_state(root: Path | None = None) -> GeneratedState:
    """Load and validate the DevSpace state file under `root`.

    Raises:
        StateFileUnavailable: If the file cannot be read
        StateFileMalformed: If the file is not YAML of the expected shape
    """
    path = (root or Path.cwd()) / STATE_FILE

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StateFileUnavailable(path, e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise StateFileMalformed(path, "not UTF-8 text") from e

    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise StateFileMalformed(path, f"not valid YAML ({e})") from e

    if document is None:
        return GeneratedState()
    if not isinstance(document, dict):
        raise StateFileMalformed(path, "top level is not a mapping")

    try:
        return GeneratedState.model_validate(document)
    except ValidationError as e:
        raise StateFileMalformed(path, f"unexpected structure ({e.error_count()} errors)") from e


def load_namespaces(root: Path | None = None) -> set[str]:
    namespaces = load_state(root).namespaces()
    logger.debug("Namespaces from state file: %s", sorted(namespaces))
    return namespaces
