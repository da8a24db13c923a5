CONFIDENCE_TIERS = ["High", "Moderate", "Low", "Insufficient"]


KNOWLEDGE_BASE_SCHEMA = {
  "type": "object",
  "additionalProperties": False,
  "required": ["patterns", "ingredients"],
  "properties": {
    "patterns": {
      "type": "array",
      "minItems": 1,
      "items": {
        "type": "object",
        "additionalProperties": False,
        "required": ["id", "name", "weight", "rationale"],
        "properties": {
          "id": {"type": "string", "minLength": 1},
          "name": {"type": "string", "minLength": 1},
          "weight": {"type": "integer", "minimum": 0},
          "rationale": {"type": "string"},
        }
      }
    },
    "ingredients": {
      "type": "array",
      "items": {
        "type": "object",
        "additionalProperties": False,
        "required": ["key", "display", "patterns", "notes"],
        "properties": {
          "key": {"type": "string", "minLength": 1},
          "display": {"type": "string", "minLength": 1},
          "patterns": {"type": "array", "minItems": 1, "items": {"type": "string"}},
          "notes": {"type": "string"},
          # missing confidence is read as "Moderate"
          "confidence": {"type": "string", "enum": CONFIDENCE_TIERS},
          "sources": {
            "type": "array",
            "items": {
              "type": "object",
              "additionalProperties": False,
              "required": ["title"],
              "properties": {
                "title": {"type": "string", "minLength": 1},
                "url": {"type": ["string", "null"]},
              }
            }
          },
        }
      }
    }
  }
}
