"""Export JSON schemas for the extraction drafts and review forms."""

import json
from pathlib import Path

from pydantic import BaseModel

from backend.app.models import ContractDraft, ContractReviewForm, InvoiceDraft, InvoiceReviewForm

SCHEMA_MODELS: list[type[BaseModel]] = [InvoiceDraft, ContractDraft, InvoiceReviewForm, ContractReviewForm]


def main(schemas_dir: Path = Path("docs/schemas")) -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir.mkdir(parents=True, exist_ok=True)

    for model in SCHEMA_MODELS:
        schema_path = schemas_dir / f"{model.__name__}.schema.json"
        with open(schema_path, "w") as f:
            json.dump(model.model_json_schema(), f, indent=2)
        print(f"Exported {model.__name__} schema to {schema_path}")


if __name__ == "__main__":
    main()
