"""이 파일은 .py 엔트리포인트로 frogbot 명령행을 실행합니다."""

from frogbot.cli import main

if __name__ == "__main__":
    main()
