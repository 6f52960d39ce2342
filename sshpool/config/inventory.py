"""YAML 主机清单"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import marshmallow
import marshmallow_dataclass
import yaml

from sshpool.core.exceptions import ConfigError
from sshpool.core.models import RemoteEndpoint
from sshpool.core.remote import parse_remote


@dataclass
class Inventory:
    """
    主机清单:

        key: ~/.ssh/deploy
        strict: "no"
        as_user: www
        hosts:
          - deploy@web1:2222
          - deploy@web2
    """

    hosts: List[str] = field(default_factory=list)
    key: Optional[str] = None
    strict: Optional[str] = None
    as_user: Optional[str] = None

    def endpoints(self) -> List[RemoteEndpoint]:
        return [parse_remote(h) for h in self.hosts]

    def connection_options(self) -> Dict[str, Any]:
        """所有连接共用的参数"""
        return {
            "key": str(Path(self.key).expanduser()) if self.key else None,
            "strict": self.strict,
            "as_user": self.as_user,
        }


InventorySchema = marshmallow_dataclass.class_schema(Inventory)


def load_inventory(path: Union[str, Path]) -> Inventory:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Inventory file '{path}' does not exist")

    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid inventory file '{path}': {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid inventory file '{path}': expected a mapping")

    # strict 在 YAML 中常写成 no/yes，会被解析为布尔值
    if isinstance(data.get("strict"), bool):
        data["strict"] = "yes" if data["strict"] else "no"

    try:
        inventory = InventorySchema().load(data)
    except marshmallow.ValidationError as e:
        raise ConfigError(f"Invalid inventory file '{path}': {e.messages}")

    # 提前校验主机串
    inventory.endpoints()
    return inventory
