from dataclasses import dataclass, field
from typing import List

MAX_LOGS = 200


@dataclass
class StatusStore:
    busy: bool = False
    logs: List[str] = field(default_factory=list)

    def set_busy(self, v: bool):
        self.busy = v

    def log(self, msg: str):
        self.logs.append(msg)
        if len(self.logs) > MAX_LOGS:
            self.logs = self.logs[-MAX_LOGS:]
