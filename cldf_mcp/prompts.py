"""
Bootstrap instructions sent during the MCP handshake
"""

BOOTSTRAP_PROMPT = """
CLDF MCP server connected. Tools wrap the `cldf` command-line program, which
reads and writes CLDF climbing-data archives on the user's machine. All paths
are local to that machine.

## Recommended workflow

1. cldf_schema_info - learn the structure first
   - component="exampleData" for working payloads
   - component="commonMistakes" before sending data
   - component="fieldReference" for required/optional fields
2. cldf_validate_data - dry-run your JSON; returns {valid, source, errors}
3. cldf_create - write the archive (template, outputPath, data)

## Reading archives

- cldf_validate - check an existing archive (filePath, strict)
- cldf_query - select locations/climbs/sessions/media/all (filePath, dataType, filter, clid)
- cldf_search_by_clid - fetch one entity by CLID, e.g. clid:v1:route:<uuid>
- cldf_extract / cldf_extract_media - copy data or media out of an archive
- cldf_query_media - media metadata and counts

## Transforming archives

- cldf_merge - combine archives (files, outputPath, strategy)
- cldf_convert - export to json/csv/yaml

IDs: location.id, route.id and sector.id are integers. belayType belongs on climbs, not routes.
"""
