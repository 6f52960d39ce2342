#!/usr/bin/python
from setuptools import setup, find_namespace_packages

setup(
      name='sshpool',
      version='1.0.0',
      description='Run commands and copy directories on a pool of hosts over SSH',
      author='sshpool developers',
      license='MIT',
      packages=find_namespace_packages(include=["sshpool", "sshpool.*"]),
      include_package_data=True,
      zip_safe=False,
      # 安装依赖的其他包
      install_requires = [
        "click",
        "rich",
        "PyYAML",
        "Jinja2",
        "marshmallow",
        "marshmallow-dataclass",
        "tenacity"
      ],
      extras_require={
        "test": ["pytest"],
      },
    # 安装后，命令行执行 `key` 相当于调用 `value`: 中的 :`value` 方法
    entry_points={
        'console_scripts':[
            'sshpool = sshpool.cli:main'
        ]
    },
    python_requires='>=3.8'
)
