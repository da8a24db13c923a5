import os
from dataclasses import dataclass

OUTPUT_FORMATS = ("text", "json")


@dataclass(frozen=True)
class Settings:
    knowledge_base_path: str
    output_format: str

    @staticmethod
    def from_env() -> "Settings":
        kb_path = os.environ.get("IRS_KNOWLEDGE_BASE", "").strip()
        output_format = os.environ.get("IRS_OUTPUT", "text").strip().lower() or "text"

        if kb_path and not os.path.isfile(kb_path):
            raise RuntimeError(f"IRS_KNOWLEDGE_BASE not found: {kb_path}")
        if output_format not in OUTPUT_FORMATS:
            raise RuntimeError(
                f"IRS_OUTPUT must be one of {', '.join(OUTPUT_FORMATS)} (got {output_format!r})"
            )

        return Settings(
            knowledge_base_path=kb_path,
            output_format=output_format,
        )
