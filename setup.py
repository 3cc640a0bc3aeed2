from setuptools import setup

setup(name='ridingbins',
      version='0.1.0',
      description='Tile and hex grid maps and choropleths of Canadian electoral ridings.',
      author='Benjamin F. Maier',
      author_email='benjaminfrankmaier@gmail.com',
      license='MIT',
      packages=['ridingbins'],
      include_package_data = True,
      package_data={
          'ridingbins': ['data/*.csv'],
      },
      python_requires='>=3.9',
      install_requires=[
          'numpy',
          'pandas',
          'geopandas',
          'shapely>=2.0',
          'matplotlib>=3.6',
          'visvalingamwyatt',
          'tqdm',
      ],
      extras_require={
          'test': ['pytest'],
      },
      dependency_links=[
          ],
      zip_safe=False)
