"""Data models for the SL metro departure tracker."""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Journey:
    """Journey a departure belongs to."""
    id: int
    state: str
    prediction_state: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Journey":
        return cls(
            id=int(data["id"]),
            state=str(data["state"]),
            prediction_state=data.get("prediction_state"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "state": self.state, "prediction_state": self.prediction_state}


@dataclass
class StopArea:
    """Stop area (the station as a whole)."""
    id: int
    name: str
    type: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StopArea":
        return cls(id=int(data["id"]), name=str(data["name"]), type=str(data["type"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "type": self.type}


@dataclass
class StopPoint:
    """Platform or stop point within a stop area."""
    id: int
    name: str
    designation: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StopPoint":
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            designation=data.get("designation"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "designation": self.designation}


@dataclass
class Line:
    """Line serving a departure."""
    id: int
    designation: str
    transport_authority_id: int
    transport_mode: str  # e.g. "METRO", "BUS", "TRAM"
    group_of_lines: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Line":
        return cls(
            id=int(data["id"]),
            designation=str(data["designation"]),
            transport_authority_id=int(data["transport_authority_id"]),
            transport_mode=str(data["transport_mode"]),
            group_of_lines=data.get("group_of_lines"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "designation": self.designation,
            "transport_authority_id": self.transport_authority_id,
            "transport_mode": self.transport_mode,
            "group_of_lines": self.group_of_lines,
        }


@dataclass
class Deviation:
    """Service deviation attached to a single departure."""
    importance_level: int
    message: str
    consequence: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Deviation":
        return cls(
            importance_level=int(data["importance_level"]),
            message=str(data["message"]),
            consequence=data.get("consequence"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "importance_level": self.importance_level,
            "consequence": self.consequence,
            "message": self.message,
        }


@dataclass
class DeviationScope:
    """What a stop deviation applies to."""
    lines: Optional[List[Line]] = None
    stop_areas: Optional[List[StopArea]] = None
    stop_points: Optional[List[StopPoint]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeviationScope":
        lines = data.get("lines")
        stop_areas = data.get("stop_areas")
        stop_points = data.get("stop_points")
        return cls(
            lines=[Line.from_dict(x) for x in lines] if lines is not None else None,
            stop_areas=[StopArea.from_dict(x) for x in stop_areas] if stop_areas is not None else None,
            stop_points=[StopPoint.from_dict(x) for x in stop_points] if stop_points is not None else None,
        )


@dataclass
class StopDeviation:
    """Service deviation affecting a whole stop."""
    importance_level: int
    message: str
    id: Optional[int] = None
    scope: Optional[DeviationScope] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StopDeviation":
        scope = data.get("scope")
        return cls(
            importance_level=int(data["importance_level"]),
            message=str(data["message"]),
            id=data.get("id"),
            scope=DeviationScope.from_dict(scope) if scope is not None else None,
        )


@dataclass
class Departure:
    """
    One upcoming vehicle departure at a station.

    ``uid`` is assigned when the departure is decoded; it is not stable across
    fetches and is never persisted.
    """
    direction: str
    direction_code: int
    destination: str
    state: str
    scheduled: str  # naive local time, "2025-01-27T10:00:00"
    expected: str
    display: str  # pre-formatted by upstream, e.g. "2 min" or "Nu"
    journey: Journey
    stop_area: StopArea
    stop_point: StopPoint
    line: Line
    deviations: Optional[List[Deviation]] = None
    uid: str = field(default_factory=lambda: uuid.uuid4().hex, compare=False)

    @property
    def transport_mode(self) -> str:
        return self.line.transport_mode

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Departure":
        """
        Decode a departure object as returned by the SL Transport API.

        Raises:
            KeyError, TypeError, ValueError: If the payload does not match the schema.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected departure object, got {type(data).__name__}")

        deviations = data.get("deviations")
        return cls(
            direction=str(data["direction"]),
            direction_code=int(data["direction_code"]),
            destination=str(data["destination"]),
            state=str(data["state"]),
            scheduled=str(data["scheduled"]),
            expected=str(data["expected"]),
            display=str(data["display"]),
            journey=Journey.from_dict(data["journey"]),
            stop_area=StopArea.from_dict(data["stop_area"]),
            stop_point=StopPoint.from_dict(data["stop_point"]),
            line=Line.from_dict(data["line"]),
            deviations=[Deviation.from_dict(d) for d in deviations] if deviations is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Encode back to the upstream shape (used for the shared cache)."""
        return {
            "direction": self.direction,
            "direction_code": self.direction_code,
            "destination": self.destination,
            "state": self.state,
            "scheduled": self.scheduled,
            "expected": self.expected,
            "display": self.display,
            "journey": self.journey.to_dict(),
            "stop_area": self.stop_area.to_dict(),
            "stop_point": self.stop_point.to_dict(),
            "line": self.line.to_dict(),
            "deviations": [d.to_dict() for d in self.deviations] if self.deviations is not None else None,
        }


@dataclass
class DeparturesResponse:
    """Body of ``GET /sites/{siteId}/departures``."""
    departures: List[Departure]
    stop_deviations: Optional[List[StopDeviation]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeparturesResponse":
        if not isinstance(data, dict):
            raise TypeError(f"Expected response object, got {type(data).__name__}")
        departures = data["departures"]
        if not isinstance(departures, list):
            raise TypeError("'departures' must be a list")

        stop_deviations = data.get("stop_deviations")
        return cls(
            departures=[Departure.from_dict(d) for d in departures],
            stop_deviations=(
                [StopDeviation.from_dict(d) for d in stop_deviations]
                if stop_deviations is not None
                else None
            ),
        )


@dataclass
class PinnedStation:
    """A favorited station. Identity is the site id."""
    id: str  # Site ID from the API
    name: str
    pinned_at: float  # Unix timestamp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PinnedStation":
        return cls(id=str(data["id"]), name=str(data["name"]), pinned_at=float(data["pinnedAt"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "pinnedAt": self.pinned_at}


@dataclass
class CacheEntry:
    """Result of one fetch cycle, as shown by the app and the widget."""
    produced_at: float  # Unix timestamp
    station_name: Optional[str]
    departures: List[Departure] = field(default_factory=list)
    error: Optional[str] = None
    pending: bool = False  # fetch still running, nothing to show yet; never persisted

    def upcoming(self, limit: int = 3) -> List[Departure]:
        """First ``limit`` departures, in stored order."""
        return self.departures[:limit]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheEntry":
        return cls(
            produced_at=float(data["producedAt"]),
            station_name=data.get("stationName"),
            departures=[Departure.from_dict(d) for d in data.get("departures") or []],
            error=data.get("error"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "producedAt": self.produced_at,
            "stationName": self.station_name,
            "departures": [d.to_dict() for d in self.departures],
            "error": self.error,
        }
