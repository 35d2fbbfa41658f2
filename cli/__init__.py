# cli - 커맨드라인 진입점
