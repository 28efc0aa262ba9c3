import pytest
from pydantic import ValidationError

from vectorkb.index.base import IndexSpec
from vectorkb.index.mapping import FieldType, IndexCreationRequest, VectorMethod


class TestIndexSpec:
    def test_accepts_wire_keys(self):
        spec = IndexSpec.model_validate(
            {"indexName": "kb-1", "dimensions": "1024", "vectorField": "v", "textField": "t", "metadataField": "m"}
        )
        assert spec.index_name == "kb-1"
        assert spec.vector_dimension == 1024

    def test_knowledge_base_defaults(self):
        spec = IndexSpec.for_knowledge_base("kb-index", 1536)
        assert spec.vector_field == "kb-index"
        assert spec.text_field == "TEXT_CHUNK"
        assert spec.metadata_field == "METADATA"

    @pytest.mark.parametrize("dimension", [0, -3, "abc"])
    def test_rejects_invalid_dimension(self, dimension):
        with pytest.raises(ValidationError):
            IndexSpec(
                index_name="kb-1", vector_dimension=dimension, vector_field="v", text_field="t", metadata_field="m"
            )

    def test_rejects_empty_index_name(self):
        with pytest.raises(ValidationError):
            IndexSpec(index_name="", vector_dimension=8, vector_field="v", text_field="t", metadata_field="m")


class TestIndexCreationRequest:
    def test_body_for_spec(self):
        spec = IndexSpec(index_name="kb-1", vector_dimension=1024, vector_field="v", text_field="t", metadata_field="m")

        body = IndexCreationRequest.from_spec(spec).to_body()

        assert body == {
            "settings": {"index": {"knn": True}},
            "mappings": {
                "properties": {
                    "m": {"type": "text", "index": False},
                    "t": {"type": "text", "index": True},
                    "v": {
                        "type": "knn_vector",
                        "dimension": 1024,
                        "method": {"name": "hnsw", "space_type": "l2", "engine": "faiss"},
                    },
                }
            },
        }

    def test_custom_vector_method(self):
        spec = IndexSpec.for_knowledge_base("kb-1", 8)
        request = IndexCreationRequest.from_spec(spec, method=VectorMethod(space_type="innerproduct"))

        (vector_field,) = request.vector_fields
        assert vector_field.type == FieldType.KNN_VECTOR
        assert vector_field.method.space_type == "innerproduct"
        assert vector_field.method.name == "hnsw"
