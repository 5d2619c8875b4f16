"""
Tests for the ShaderChunkMerger.
"""

from cjsify.config import RuntimeConfig
from cjsify.core.ingestion import ingest
from cjsify.core.shader_chunks import ShaderChunkMerger
from cjsify.utils.js_ast import generate_source
from tests.conftest import compact

CHUNK_PATH = "./renderers/shaders/ShaderChunk.js"


def test_chunks_appended_in_order():
  ingestion = ingest(
    {
      CHUNK_PATH: "THREE.ShaderChunk = { existing: 'x' };",
      "./renderers/shaders/ShaderChunk/fog.glsl": "uniform float fogNear;",
      "./renderers/shaders/ShaderChunk/alpha.glsl": 'uniform float "alpha";\n',
    },
    RuntimeConfig(),
  )
  merger = ShaderChunkMerger(CHUNK_PATH)
  assert merger.merge(ingestion.files, ingestion.shader_chunks) == 2

  code = compact(generate_source(ingestion.files[CHUNK_PATH].program))
  assert code.startswith("THREE.ShaderChunk={existing:'x',")
  assert "'alpha':'uniformfloat\"alpha\";\\n'" in code
  assert "'fog':'uniformfloatfogNear;'" in code
  assert code.index("'alpha'") < code.index("'fog'")


def test_missing_chunk_file():
  ingestion = ingest({"./fog.glsl": "x"}, RuntimeConfig())
  assert ShaderChunkMerger(CHUNK_PATH).merge(ingestion.files, ingestion.shader_chunks) == 0


def test_unexpected_table_shape():
  ingestion = ingest({CHUNK_PATH: "var chunks = {};", "./fog.glsl": "x"}, RuntimeConfig())
  assert ShaderChunkMerger(CHUNK_PATH).merge(ingestion.files, ingestion.shader_chunks) == 0
