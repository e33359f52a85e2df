from setuptools import setup, find_packages

setup(name='quizdeck',
      version='0.1.0',
      description='terminal flashcards and multiple-choice quizzes from plain-text banks',
      author='gront',
      packages=find_packages(exclude=['tests', 'tests.*']),
      python_requires='>=3.8',
      install_requires=[
          'numpy',
          'pandas',
      ],
      extras_require={
          'test': ['pytest'],
      },
      entry_points={
          'console_scripts': [
              'quizdeck=quizdeck.cli:main',
          ],
      },
     )
