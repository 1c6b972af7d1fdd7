import functools
import typing as t
from pathlib import Path

import pydantic as p
import yaml
from pydantic_settings import PydanticBaseSettingsSource
from pydantic_settings import SettingsError

from seezee.model import DeploymentEnvironment

# fields set by the caller at boot, never read from files
BootKeys = frozenset({"env", "root", "override"})


def merge(base: dict[str, t.Any], overlay: t.Mapping[str, t.Any]) -> dict[str, t.Any]:
    """A copy of base with overlay laid over it, mappings merged key by key."""
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, t.Mapping) and isinstance(merged.get(key), t.Mapping):
            merged[key] = merge(merged[key], t.cast(t.Mapping[str, t.Any], value))
        else:
            merged[key] = value
    return merged


class CurrentState(t.TypedDict, total=False):
    root: t.Required[p.AnyUrl]
    env: t.Required[DeploymentEnvironment]


class SettingsCurrentState(CurrentState, total=False):
    override: t.Required[tuple[str, ...]]


class SettingsSource(PydanticBaseSettingsSource):
    def __call__(self) -> dict[str, t.Any]:
        # we expect init kwargs to have config root and env in them
        data: dict[str, t.Any] = {}

        for field_name, field in self.settings_cls.model_fields.items():
            if field_name in BootKeys:
                continue
            try:
                field_value, field_key, value_is_complex = self.get_field_value(field, field_name)
                field_value = self.prepare_field_value(field_name, field, field_value, value_is_complex)
            except KeyError:
                continue
            except ValueError as e:
                raise SettingsError(f"error parsing value for field {field_name!r} from source {self!r}") from e
            except Exception as e:
                raise SettingsError(f"error getting value for field {field_name!r} from source {self!r}") from e

            data[field_key] = field_value
        return data

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        return value

    def load_paths(self) -> list[Path]:
        """The config root, then the overlay directory for the environment."""
        current_state = t.cast(CurrentState, self.current_state)
        root = current_state["root"]
        assert root.scheme == "file" and root.path is not None, "root is not a legible location of YAML files"
        env = current_state["env"]
        paths = [Path(root.path)]
        if env is not DeploymentEnvironment.Local:
            # we don't have a special directory for local/ that's just root
            paths.append(Path(root.path) / "env.d" / env.value)
        return paths


class OverrideSettingsSource(SettingsSource):
    """`-o storage.persistent.sqlite.database=/tmp/x.db` style overrides.

    Values are parsed as YAML, so `-o logging.root.level=DEBUG` gives a string
    and `-o logging.disable_existing_loggers=false` a bool.
    """

    @functools.cached_property
    def parsed_options(self) -> dict[str, t.Any]:
        current_state = t.cast(SettingsCurrentState, self.current_state)
        od: dict[str, t.Any] = {}
        for o in current_state["override"]:
            k, v = [s.strip() for s in o.split("=", 1)]

            target = od
            path = k.split(".")
            for key in path[:-1]:
                target = target.setdefault(key, {})
            target[path[-1]] = yaml.safe_load(v)
        return od

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        if field_name not in self.parsed_options:
            raise KeyError(field_name)
        value = self.parsed_options[field_name]
        return value, field_name, isinstance(value, dict)


class YAMLCascadingSettingsSource(SettingsSource):
    """Reads `<field>.yaml` from each load path, later paths merged over earlier."""

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        yamls: list[str] = []
        for path in self.load_paths():
            fn = path / f"{field_name}.yaml"
            if fn.exists():
                yamls.append(fn.read_text(encoding="utf8"))
        if not yamls:
            raise KeyError(field_name)
        return yamls, field_name, True

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        # for complex values, we expect to be given a list[str] representing
        # the yamls encountered along the load_paths
        if not isinstance(value, list):
            raise ValueError(field_name)
        merged: t.Any = None
        for doc in t.cast(list[str], value):
            loaded = yaml.safe_load(doc)
            if isinstance(merged, dict) and isinstance(loaded, dict):
                merged = merge(merged, loaded)
            else:
                merged = loaded
        return merged


class YAMLSecretsSource(SettingsSource):
    """Secrets from a plain `secrets.yaml`, looked up like the settings files."""

    filename: t.ClassVar[str] = "secrets.yaml"

    @functools.cached_property
    def secrets(self) -> dict[str, t.Any]:
        merged: dict[str, t.Any] = {}
        for path in self.load_paths():
            fn = path / self.filename
            if fn.exists():
                loaded = yaml.safe_load(fn.read_text(encoding="utf8")) or {}
                merged = merge(merged, loaded)
        return merged

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        if field_name not in self.secrets:
            raise KeyError(field_name)
        value = self.secrets[field_name]
        return value, field_name, isinstance(value, dict)
