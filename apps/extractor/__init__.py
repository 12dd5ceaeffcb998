"""
Extractor App - FEMA Web Declaration Areas

Responsibilities:
- Build the rolling-window query (designatedDate after now - N years, not closed out)
- Paginate through the OpenFEMA FemaWebDeclarationAreas endpoint ($skip/$top)
- Abort the whole run on the first transport or deserialization failure
- Export the ordered results to CSV (or JSONL) once every page succeeded

Output:
- CSV_PATH (default out.csv), one row per declaration area
"""
