"""
inventory/parsers - 원시 레코드 -> 정규화된 엔티티 파서

모든 파서의 시그니처는 (batcher, record, scope) -> None 입니다.
"""
