"""Schema examples and common patterns for CLDF data, served by cldf_schema_info."""

from __future__ import annotations

from typing import Any

_MANIFEST: dict[str, Any] = {
    "version": "1.0.0",
    "format": "CLDF",
    "platform": "Desktop",
    "appVersion": "1.0.0",
    "creationDate": "2024-01-29T12:00:00Z",
}

SCHEMA_EXAMPLES: dict[str, Any] = {
    "minimalValid": {
        "description": "Minimal valid CLDF structure with just locations",
        "data": {
            "manifest": dict(_MANIFEST),
            "locations": [
                {
                    "id": 1,
                    "name": "Example Crag",
                    "country": "USA",
                    "isIndoor": False,
                    "coordinates": {"latitude": 40.0, "longitude": -105.0},
                }
            ],
            "checksums": {"algorithm": "SHA-256"},
        },
        "notes": ["location.id MUST be an integer, not a string"],
    },
    "withRoutes": {
        "description": "CLDF with locations and routes",
        "data": {
            "manifest": dict(_MANIFEST),
            "locations": [
                {
                    "id": 1,
                    "name": "Example Gym",
                    "country": "USA",
                    "isIndoor": True,
                    "city": "Boulder",
                    "address": "123 Main St",
                }
            ],
            "routes": [
                {
                    "id": 1,
                    "locationId": 1,
                    "name": "Crimpy Delight",
                    "routeType": "boulder",
                    "grades": {"vScale": "V4"},
                    "color": "#FF0000",
                    "qualityRating": 4,
                }
            ],
            "checksums": {"algorithm": "SHA-256"},
        },
        "notes": [
            "route.id and route.locationId MUST be integers; locationId matches a location.id",
            "routeType enum: boulder | route",
            "vScale pattern: V(B|[0-9]{1,2}); french pattern: [3-9][abc][+]?",
            "color is a hex string (#RRGGBB), qualityRating an integer 0-5",
            "belayType is NOT valid for routes - only for climbs",
        ],
    },
    "withClimbs": {
        "description": "CLDF with climbing session data (manifest and locations omitted)",
        "data": {
            "climbs": [
                {
                    "id": 1,
                    "routeId": "1",
                    "routeName": "Crimpy Delight",
                    "date": "2024-01-29",
                    "type": "boulder",
                    "finishType": "top",
                    "attempts": 1,
                    "grades": {"grade": "V4", "system": "vScale"},
                    "belayType": "topRope",
                }
            ]
        },
        "notes": [
            "climb.routeId may be a string",
            "date is an ISO date",
            "finishType enum: top, fall, ...",
            "belayType IS valid for climbs",
        ],
    },
}

COMMON_MISTAKES: dict[str, Any] = {
    "wrongIdTypes": {
        "issue": "Using string IDs for locations/routes",
        "wrong": {"id": "1", "locationId": "1"},
        "correct": {"id": 1, "locationId": 1},
        "note": "Location and Route IDs must be integers. Climb IDs can be strings.",
    },
    "belayTypeOnRoute": {
        "issue": "Adding belayType to routes instead of climbs",
        "wrong": {"routes": [{"belayType": "lead"}]},
        "correct": {"climbs": [{"belayType": "lead"}]},
        "note": "belayType is a property of climbs (the ascent), not routes (the line)",
    },
    "invalidGradeFormat": {
        "issue": "Incorrect grade patterns",
        "wrong": [
            {"grades": {"french": "6a++"}},
            {"grades": {"vScale": "v4"}},
        ],
        "correct": [
            {"grades": {"french": "6a+"}},
            {"grades": {"vScale": "V4"}},
        ],
    },
    "missingRequiredFields": {
        "issue": "Missing required fields",
        "requirements": {
            "manifest": ["version", "format", "platform", "appVersion", "creationDate"],
            "location": ["id", "name", "country", "isIndoor"],
            "route": ["id", "locationId", "name", "routeType"],
            "climb": ["id", "date", "type", "finishType"],
        },
    },
    "unsupportedFields": {
        "issue": "Using fields not in schema",
        "examples": ["customFields", "userDefined", "extra"],
        "note": "Only fields defined in the schema are allowed",
    },
}

FIELD_REFERENCE: dict[str, Any] = {
    "location": {
        "required": ["id", "name", "country", "isIndoor"],
        "optional": [
            "state",
            "city",
            "address",
            "coordinates",
            "terrainType",
            "rockType",
            "accessInfo",
        ],
        "types": {
            "id": "integer",
            "coordinates": "{ latitude: number, longitude: number }",
            "isIndoor": "boolean",
        },
    },
    "route": {
        "required": ["id", "locationId", "name", "routeType"],
        "optional": [
            "sectorId",
            "grades",
            "height",
            "color",
            "qualityRating",
            "firstAscent",
            "beta",
            "protectionRating",
            "gearNotes",
            "tags",
        ],
        "types": {
            "id": "integer",
            "locationId": "integer",
            "sectorId": "integer",
            "qualityRating": "integer (0-5)",
            "height": "number (meters)",
            "color": "string (#RRGGBB hex)",
        },
    },
    "climb": {
        "required": ["id", "date", "type", "finishType"],
        "optional": [
            "routeId",
            "routeName",
            "sessionId",
            "attempts",
            "grades",
            "belayType",
            "partner",
            "notes",
            "rating",
            "tags",
        ],
        "types": {
            "id": "integer or string",
            "date": "string (ISO date)",
            "attempts": "integer",
            "belayType": "enum: topRope, lead, autoBelay",
        },
    },
}

# Components answered from the tables above without calling the cldf program
STATIC_COMPONENTS: dict[str, dict[str, Any]] = {
    "exampleData": SCHEMA_EXAMPLES,
    "commonMistakes": COMMON_MISTAKES,
    "fieldReference": FIELD_REFERENCE,
}

AI_HINTS: dict[str, str] = {
    "quickStart": "Use component='exampleData' for working examples",
    "validation": "Use component='commonMistakes' to avoid errors",
    "reference": "Use component='fieldReference' for quick field lookup",
}

CREATE_VALIDATION_GUIDANCE = """
CLDF Archive Creation Failed - Validation Errors:

{errors}

Common Issues & Solutions:
- Use cldf_schema_info to understand the expected data structure
- Minimum required: manifest and at least one location
- Sessions and climbs are optional - archives can contain just locations/routes
- Check that all required fields are present
- Verify enum values match allowed options
- Ensure ID types are correct (location.id = integer, route.id = integer, sector.id = integer)
- Location now supports city and address fields (both optional)
- Date formats are flexible but must include timezone for OffsetDateTime fields
- Route grades must match pattern (e.g., French: 5c, 6a+, 7b)
- Colors must be hex format (#RRGGBB)

Use cldf_schema_info with component="commonMistakes" for more details.
"""
