# run.py
from dotenv import load_dotenv
import os
basedir = os.path.abspath(os.path.dirname(__file__))
# 이 디렉터리 안에 있는 '.env' 파일을 명시적으로 로드합니다.
load_dotenv(dotenv_path=os.path.join(basedir, '.env'))

from formai import create_app  # noqa: E402

app = create_app()

if __name__ == '__main__':
    host = os.getenv('FLASK_RUN_HOST', '127.0.0.1')
    port = int(os.getenv('FLASK_RUN_PORT', 4001))
    debug = app.config.get('DEBUG', False)
    app.run(host=host, port=port, debug=debug, threaded=True)
