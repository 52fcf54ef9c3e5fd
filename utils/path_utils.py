from pathlib import Path


# 项目根目录
BASE_DIR = Path(__file__).resolve().parents[1]

# 常用子目录路径
CONFIG_DIR = BASE_DIR / 'config'
LOG_DIR = BASE_DIR / 'log'
DATA_DIR = BASE_DIR / 'data'

# 日志文件路径
LOG_FILE = LOG_DIR / 'budget.log'


if __name__ == "__main__":
    print("BASE_DIR:", BASE_DIR)
    print("CONFIG_DIR:", CONFIG_DIR)
    print("DATA_DIR:", DATA_DIR)
    print("LOG_FILE:", LOG_FILE)
