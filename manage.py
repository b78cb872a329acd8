import subprocess
import sys
from pathlib import Path

import typer

sys.path.insert(0, str(Path(__file__).parent.absolute() / "src"))

from config import HOST, PORT
from services.data_service import DataService

app = typer.Typer(help="生产订单管理系统 管理工具")


@app.command()
def serve(host: str = typer.Option(HOST, help="监听地址"),
          port: int = typer.Option(PORT, help="监听端口"),
          debug: bool = typer.Option(False, help="Flask 调试模式")):
    """启动订单 API 服务"""
    from main import main
    main(host=host, port=port, debug=debug)


@app.command()
def backup():
    """立即备份数据文件"""
    backup_file = DataService().create_backup()
    if backup_file is None:
        typer.echo("数据文件不存在或备份失败，未创建备份。")
        raise typer.Exit(code=1)
    typer.echo(f"✅ 已备份到 {backup_file}")


@app.command()
def check():
    """检查数据文件，输出各集合条目数"""
    service = DataService()
    typer.echo(f"数据文件: {service.data_file}")
    for key, count in service.get_collection_counts().items():
        typer.echo(f"  {key}: {count}")


@app.command()
def test():
    """运行 Pytest 测试套件"""
    typer.echo("🚀 正在运行自动化测试...")
    result = subprocess.run([sys.executable, "-m", "pytest", "tests/"])
    if result.returncode != 0:
        typer.echo("\n❌ 测试失败！")
        raise typer.Exit(code=result.returncode)
    typer.echo("\n✅ 所有测试通过。")


if __name__ == "__main__":
    app()
